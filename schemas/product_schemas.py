from pydantic import BaseModel, Field
from typing import Optional


class ProductSchema(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    description: str = ""
    image: str = ""
    category: str = ""
    count_in_stock: int = Field(0, ge=0)


class ProductQuerySchema(BaseModel):
    search: Optional[str] = None
    price_from: float = 0
    price_to: float = 100000
    category: Optional[str] = None
    sort_by: str = "popularity"


__all__ = ["ProductSchema", "ProductQuerySchema"]
