from typing import Optional
from fastapi import APIRouter, Query
from services.products_service import (create_product, delete_product, get_product, list_products,
                                       top_products, update_product)
from schemas.product_schemas import ProductQuerySchema, ProductSchema


router = APIRouter(prefix="/products")


@router.get("")
async def get_products(search: Optional[str] = None, price_from: float = 0, price_to: float = 100000,
                       category: Optional[str] = None, sort_by: str = "popularity"):
    # catalog listing with the same filters as the catalog page
    query = ProductQuerySchema(search=search, price_from=price_from, price_to=price_to,
                               category=category, sort_by=sort_by)
    products = await list_products(query)
    return {"status": "success", "products": products}


@router.get("/top")
async def get_top_products(limit: int = Query(8, ge=1)):
    # best rated products for the home page
    products = await top_products(limit)
    return {"status": "success", "products": products}


@router.get("/{product_id}")
async def fetch_product(product_id: str):
    product = await get_product(product_id)
    return {"status": "success", "product": product}


@router.post("", status_code=201)
async def upload_product(product: ProductSchema):
    created = await create_product(product)
    return {"status": "success", "product": created}


@router.put("/{product_id}")
async def edit_product(product_id: str, product: ProductSchema):
    updated = await update_product(product_id, product)
    return {"status": "success", "product": updated}


@router.delete("/{product_id}")
async def remove_product(product_id: str):
    await delete_product(product_id)
    return {"status": "success", "message": "Product deleted"}
