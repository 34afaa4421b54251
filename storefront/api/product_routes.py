from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, Optional

from storefront.api.deps import get_product_store
from storefront.models.product import ProductUpdate
from storefront.services.entity_store import AsyncEntityStore

router = APIRouter(prefix="/products", tags=["products"])

@router.get("")
async def list_products(limit: Optional[int] = None, store: AsyncEntityStore = Depends(get_product_store)):
    # with a limit, the first `limit` products in insertion order
    return {"products": await store.list(limit)}

@router.get("/{pid}")
async def get_product(pid: int, store: AsyncEntityStore = Depends(get_product_store)):
    return {"status": "success", "product": await store.get_by_id(pid)}

@router.post("", status_code=201)
async def create_product(
    payload: Dict[str, Any] = Body(..., examples=[{
        "title": "Chocolinas", "description": "Galletitas de chocolate", "code": "abc123",
        "price": 1000.99, "stock": 50, "category": "galletitas",
    }]),
    store: AsyncEntityStore = Depends(get_product_store),
):
    product = await store.create(payload)
    return {"message": "Product created", "product": product}

@router.put("/{pid}")
async def update_product(pid: int, update: ProductUpdate, store: AsyncEntityStore = Depends(get_product_store)):
    product = await store.update(pid, update.model_dump(exclude_unset=True))
    return {"status": "success", "message": "Product updated", "data": product}

@router.delete("/{pid}")
async def delete_product(pid: int, store: AsyncEntityStore = Depends(get_product_store)):
    product = await store.delete(pid)
    return {"status": "success", "message": "Product deleted", "data": product}
