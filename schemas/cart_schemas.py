from pydantic import BaseModel, Field
from typing import List


class ProductRef(BaseModel):
    product_id: str
    name: str
    image: str = ""
    price: float = Field(..., ge=0)
    count_in_stock: int = Field(0, ge=0)

    @classmethod
    def from_document(cls, product: dict) -> "ProductRef":
        # catalog documents come straight from mongo, with either naming of the stock field
        return cls(
            product_id=str(product["_id"]),
            name=product["name"],
            image=product.get("image", ""),
            price=product["price"],
            count_in_stock=product.get(
                "count_in_stock", product.get("countInStock", 0)),
        )


class CartLineItem(BaseModel):
    product_id: str
    name: str
    image: str = ""
    price: float = Field(..., ge=0)
    count_in_stock: int = Field(0, ge=0)
    quantity: int = Field(..., ge=1)


class CartState(BaseModel):
    items: List[CartLineItem] = []
    total_price: float = 0
    item_count: int = 0


class AddCartItemSchema(BaseModel):
    # name, price and stock always come from the catalog
    product_id: str
    quantity: int = 1


class UpdateQuantitySchema(BaseModel):
    quantity: int


__all__ = ["ProductRef", "CartLineItem", "CartState",
           "AddCartItemSchema", "UpdateQuantitySchema"]
