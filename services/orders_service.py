from datetime import datetime, timezone

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from mongomanager import orders_collection, product_collection
from schemas.orders_schemas import OrderSchema, OrderStatus

logger = structlog.get_logger(__name__)


def to_object_id(order_id: str) -> ObjectId:
    try:
        return ObjectId(order_id)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=404, detail="Order not found")


def serialize_order(order: dict) -> dict:
    # change id to str so the response can be encoded
    order["_id"] = str(order["_id"])
    return order


async def create_order(order: OrderSchema) -> str:
    order_dict = order.model_dump(mode="json")
    order_dict.update({
        "is_paid": False,
        "paid_at": None,
        "is_delivered": False,
        "delivered_at": None,
        "status": OrderStatus.PROCESSING.value,
        "created_at": datetime.now(timezone.utc),
    })
    result = await orders_collection.insert_one(order_dict)
    order_id = str(result.inserted_id)
    logger.info("Order created", order_id=order_id, payment_method=order_dict["payment_method"])
    return order_id


async def fetch_orders():
    # newest first, for the admin dashboard
    orders = await orders_collection.find({}).sort("created_at", -1).to_list(None)
    return [serialize_order(order) for order in orders]


async def fetch_order(order_id: str):
    order = await orders_collection.find_one({"_id": to_object_id(order_id)})
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return serialize_order(order)


async def update_order_fields(order_id: str, fields: dict):
    result = await orders_collection.update_one({"_id": to_object_id(order_id)}, {"$set": fields})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    return await fetch_order(order_id)


async def mark_order_paid(order_id: str):
    order = await update_order_fields(order_id, {
        "is_paid": True,
        "paid_at": datetime.now(timezone.utc),
    })
    logger.info("Order marked as paid", order_id=order_id)
    return order


async def mark_order_delivered(order_id: str):
    order = await update_order_fields(order_id, {
        "is_delivered": True,
        "delivered_at": datetime.now(timezone.utc),
        "status": OrderStatus.DELIVERED.value,
    })
    logger.info("Order marked as delivered", order_id=order_id)
    return order


def summarize_orders(orders, total_products: int) -> dict:
    return {
        "total_products": total_products,
        "total_orders": len(orders),
        "total_revenue": sum(order.get("total_price") or 0 for order in orders),
    }


async def order_stats():
    orders = await orders_collection.find({}, {"total_price": 1}).to_list(None)
    total_products = await product_collection.count_documents({})
    return summarize_orders(orders, total_products)
