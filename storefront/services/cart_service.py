from __future__ import annotations
import logging
from typing import Any, Dict, List

from storefront.core.errors import ValidationError
from storefront.services.entity_store import EntityStore, Record

logger = logging.getLogger(__name__)

class CartService:
    """
    Carts hold line items {"product": <product id>, "quantity": n}.
    Adding a product that is already in the cart bumps its quantity.
    """

    def __init__(self, carts: EntityStore, products: EntityStore):
        self.carts = carts
        self.products = products

    def create_cart(self) -> Record:
        cart = self.carts.create({"products": []})
        logger.info("new cart %s", cart["id"])
        return cart

    def get_cart(self, cart_id: int) -> Record:
        return self.carts.get_by_id(cart_id)

    def get_cart_products(self, cart_id: int) -> List[Dict[str, Any]]:
        return self.carts.get_by_id(cart_id)["products"]

    def add_product(self, cart_id: int, product_id: int, quantity: int = 1) -> Record:
        if quantity < 1:
            raise ValidationError("quantity must be at least 1", details={"quantity": quantity})

        def _add(cart: Record) -> Record:
            # runs under the carts lock, after apply() found the cart, so an
            # unknown cart wins over an unknown product. The products store has
            # its own lock: a product deleted right after this check can still
            # end up in the cart.
            self.products.get_by_id(product_id)
            items = cart.get("products", [])
            for item in items:
                if item["product"] == product_id:
                    item["quantity"] += quantity
                    break
            else:
                items.append({"product": product_id, "quantity": quantity})
            cart["products"] = items
            return cart

        cart = self.carts.apply(cart_id, _add)
        logger.info("cart %s: added product %s x%d", cart_id, product_id, quantity)
        return cart
