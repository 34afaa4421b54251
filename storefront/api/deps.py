from fastapi import Request

from storefront.services.cart_service import CartService
from storefront.services.entity_store import AsyncEntityStore

# Stores are built once in create_app() and parked on app.state

def get_product_store(request: Request) -> AsyncEntityStore:
    return request.app.state.products

def get_cart_service(request: Request) -> CartService:
    return request.app.state.cart_service
