from fastapi import APIRouter, Depends
from routes.cart_route import get_cart_store
from schemas.orders_schemas import CheckoutSchema
from services.cart_service import CartStore
from services.checkout_service import checkout
from services.orders_service import (create_order, fetch_order, fetch_orders, mark_order_delivered,
                                     mark_order_paid, order_stats)

router = APIRouter(prefix="/orders")


def get_order_submitter():
    return create_order


@router.post("/checkout/{cart_id}", status_code=201)
async def place_order(checkout_data: CheckoutSchema, cart: CartStore = Depends(get_cart_store),
                      submit_order=Depends(get_order_submitter)):
    # turns the cart into an order, the cart is emptied only if the order was saved
    order_id, cart_cleared = await checkout(cart, checkout_data, submit_order)
    return {"status": "success", "order_id": order_id, "cart_cleared": cart_cleared}


@router.get("")
async def get_orders():
    orders = await fetch_orders()
    return {"status": "success", "orders": orders}


@router.get("/stats")
async def get_order_stats():
    stats = await order_stats()
    return {"status": "success", "stats": stats}


@router.get("/{order_id}")
async def get_order(order_id: str):
    order = await fetch_order(order_id)
    return {"status": "success", "order": order}


@router.put("/{order_id}/pay")
async def pay_order(order_id: str):
    order = await mark_order_paid(order_id)
    return {"status": "success", "order": order}


@router.put("/{order_id}/deliver")
async def deliver_order(order_id: str):
    order = await mark_order_delivered(order_id)
    return {"status": "success", "order": order}
