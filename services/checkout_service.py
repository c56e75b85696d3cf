from typing import Awaitable, Callable, Tuple

import structlog
from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool

from microservices.cart_microservice import PersistenceUnavailable
from schemas.orders_schemas import CheckoutSchema, OrderItemSchema, OrderSchema
from services.cart_service import CartStore

logger = structlog.get_logger(__name__)


def build_order(cart: CartStore, checkout: CheckoutSchema) -> OrderSchema:
    # the order only sees a snapshot, never the cart store itself
    items = cart.items
    if not items:
        raise HTTPException(status_code=400, detail="Cart is empty")
    order_items = [
        OrderItemSchema(
            name=item.name,
            quantity=item.quantity,
            image=item.image,
            price=item.price,
            product_id=item.product_id,
        )
        for item in items
    ]
    return OrderSchema(
        order_items=order_items,
        shipping_address=checkout.shipping_address,
        payment_method=checkout.payment_method,
        total_price=cart.total_price,
        user_id=checkout.user_id,
    )

async def checkout(cart: CartStore, checkout_data: CheckoutSchema,
                   submit_order: Callable[[OrderSchema], Awaitable[str]]) -> Tuple[str, bool]:
    """Place an order from the cart and empty the cart once it is acknowledged.

    ``submit_order`` receives the order snapshot and returns the new order id.
    If it raises, the cart is left untouched so the customer can retry.

    Returns ``(order_id, cart_cleared)``. Once the order is saved it counts
    as placed even if the emptied cart cannot be written, so
    ``cart_cleared`` is False instead of an error that would invite a
    duplicate order.
    """
    order = build_order(cart, checkout_data)
    order_id = await submit_order(order)
    logger.info("Order placed", order_id=order_id, total_price=order.total_price,
                items=len(order.order_items))
    try:
        await run_in_threadpool(cart.clear)
    except PersistenceUnavailable as e:
        logger.warning("Order placed but the cart could not be cleared", order_id=order_id, error=str(e))
        return order_id, False
    return order_id, True
