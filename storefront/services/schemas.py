from storefront.models.cart import CartFields
from storefront.models.common import EntityKind
from storefront.models.product import ProductFields
from storefront.services.entity_store import EntitySchema

CART_SCHEMA = EntitySchema(kind=EntityKind.carts, model=CartFields)

def product_schema(enforce_unique_code: bool = False) -> EntitySchema:
    unique = ("code",) if enforce_unique_code else ()
    return EntitySchema(kind=EntityKind.products, model=ProductFields, unique_fields=unique)
