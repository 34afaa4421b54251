from __future__ import annotations
from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from storefront.api.cart_routes import router as cart_router
from storefront.api.errors import register_error_handlers
from storefront.api.health_routes import router as health_router
from storefront.api.product_routes import router as product_router
from storefront.core.config import Settings, settings
from storefront.core.logging import setup_logging
from storefront.services.cart_service import CartService
from storefront.services.entity_store import AsyncEntityStore, EntityStore
from storefront.services.schemas import CART_SCHEMA, product_schema

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the app and its stores. Each call gets its own stores, loaded from
    (or initialized in) `data_dir`.
    """
    cfg = app_settings or settings
    setup_logging(cfg.log_level)

    data_dir = Path(cfg.data_dir)
    products = EntityStore(
        data_dir / cfg.products_file,
        product_schema(cfg.enforce_unique_code),
        reload_on_read=cfg.reload_on_read,
    )
    carts = EntityStore(data_dir / cfg.carts_file, CART_SCHEMA, reload_on_read=cfg.reload_on_read)

    app = FastAPI(
        title="Storefront Backend",
        version="1.0.0",
    )
    app.state.settings = cfg
    app.state.products = AsyncEntityStore(products)
    app.state.cart_service = CartService(carts=carts, products=products)

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(product_router, prefix="/api")
    app.include_router(cart_router, prefix="/api")
    return app
