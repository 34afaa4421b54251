from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List

class CartItem(BaseModel):
    product: int = Field(..., description="Product id")
    quantity: int = Field(default=1, ge=1)

class CartFields(BaseModel):
    # Carts start empty; line items are added through CartService
    products: List[CartItem] = Field(default_factory=list)
