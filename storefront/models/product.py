from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

class ProductFields(BaseModel):
    """
    Business fields of a product. Everything without a default is mandatory
    at creation time; `id` is assigned by the store.
    """
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., examples=["Chocolinas"])
    description: str = Field(..., examples=["Galletitas de chocolate"])
    code: str = Field(..., examples=["abc123"])
    price: float = Field(..., examples=[1000.99])
    stock: int = Field(..., examples=[50])
    category: str = Field(..., examples=["galletitas"])

    status: bool = True
    thumbnails: List[str] = Field(default_factory=list)

class ProductUpdate(BaseModel):
    """Partial update body. Unset fields are left alone; `id` is never changed."""
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    status: Optional[bool] = None
    thumbnails: Optional[List[str]] = None
