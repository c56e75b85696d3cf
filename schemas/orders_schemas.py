from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional


class PaymentMethod(str, Enum):
    CARD_ONLINE = "card-online"
    CARD_ON_DELIVERY = "card-on-delivery"
    CASH_ON_DELIVERY = "cash-on-delivery"


class OrderStatus(str, Enum):
    PROCESSING = "processing"
    DELIVERED = "delivered"


class OrderItemSchema(BaseModel):
    name: str
    quantity: int = Field(..., ge=1)
    image: str = ""
    price: float = Field(..., ge=0)
    product_id: str


class ShippingAddressSchema(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = "Not specified"
    postal_code: str = "Not specified"
    country: str = "Russia"


class OrderSchema(BaseModel):
    order_items: List[OrderItemSchema]
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethod
    total_price: float = Field(..., ge=0)
    user_id: Optional[str] = None


class CheckoutSchema(BaseModel):
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethod = PaymentMethod.CARD_ONLINE
    user_id: Optional[str] = None


__all__ = ["PaymentMethod", "OrderStatus", "OrderItemSchema",
           "ShippingAddressSchema", "OrderSchema", "CheckoutSchema"]
