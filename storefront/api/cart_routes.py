from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])

# Plain `def` routes: FastAPI runs them in its threadpool, the stores lock internally.

@router.post("", status_code=201)
def create_cart(service: CartService = Depends(get_cart_service)):
    cart = service.create_cart()
    return {"message": "Cart created", "cart": cart}

@router.get("/{cid}")
def get_cart_products(cid: int, service: CartService = Depends(get_cart_service)):
    return {"status": "success", "products": service.get_cart_products(cid)}

@router.post("/{cid}/product/{pid}")
def add_product_to_cart(cid: int, pid: int, quantity: int = 1, service: CartService = Depends(get_cart_service)):
    cart = service.add_product(cid, pid, quantity)
    return {"status": "success", "message": "Product added to cart", "cart": cart}
