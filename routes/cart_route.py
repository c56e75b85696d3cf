import os
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from microservices.persistence_microservice import MongoSlotPersistence
from mongomanager import cart_slot_collection
from schemas.cart_schemas import AddCartItemSchema, ProductRef, UpdateQuantitySchema
from services.cart_service import CartStore
from services.products_service import get_product

router = APIRouter(prefix="/cart")


def is_strict_mode():
    return os.getenv("CART_STRICT_MODE", "false").lower() in ("1", "true", "yes")


def get_cart_store(cart_id: str) -> CartStore:
    # each cart id is its own durable slot
    return CartStore(MongoSlotPersistence(cart_slot_collection, cart_id), strict=is_strict_mode())


@router.get("/{cart_id}")
def get_cart(cart: CartStore = Depends(get_cart_store)):
    return {"status": "success", "cart": cart.snapshot()}


@router.post("/{cart_id}/items")
async def add_cart_item(req: AddCartItemSchema, cart: CartStore = Depends(get_cart_store)):
    # adds item to cart. if item already in cart, increase its quantity
    # unknown products are a 404 from the catalog lookup
    product = await get_product(req.product_id)
    state = await run_in_threadpool(cart.add_item, ProductRef.from_document(product), req.quantity)
    return {"status": "success", "cart": state}


@router.put("/{cart_id}/items/{product_id}")
def update_cart_item(product_id: str, req: UpdateQuantitySchema, cart: CartStore = Depends(get_cart_store)):
    # a quantity of zero or less removes the item
    state = cart.update_quantity(product_id, req.quantity)
    return {"status": "success", "cart": state}


@router.delete("/{cart_id}/items/{product_id}")
def delete_cart_item(product_id: str, cart: CartStore = Depends(get_cart_store)):
    state = cart.remove_item(product_id)
    return {"status": "success", "cart": state}


@router.delete("/{cart_id}")
def clear_cart(cart: CartStore = Depends(get_cart_store)):
    state = cart.clear()
    return {"status": "success", "cart": state}
