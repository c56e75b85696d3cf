from typing import Iterable
from schemas.cart_schemas import CartLineItem


class CartError(Exception):
    """Base class for conditions raised by the cart store."""


class ProductNotFound(CartError):
    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} is not in the cart")
        self.product_id = product_id


class InvalidQuantity(CartError):
    def __init__(self, quantity):
        super().__init__(f"Invalid quantity: {quantity!r}")
        self.quantity = quantity


class PersistenceUnavailable(CartError):
    # the in-memory cart is still valid when this is raised, only durability is lost
    pass


def is_whole_number(quantity) -> bool:
    # bool is an int subclass, a True quantity is a caller bug
    return isinstance(quantity, int) and not isinstance(quantity, bool)


def calculate_total(items: Iterable[CartLineItem]) -> float:
    return sum((item.price * item.quantity for item in items), 0)


def count_items(items: Iterable[CartLineItem]) -> int:
    # used for the cart badge
    return sum(item.quantity for item in items)


def find_item_index(items, product_id: str):
    for index, item in enumerate(items):
        if item.product_id == product_id:
            return index
    return None
