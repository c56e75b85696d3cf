import structlog
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from microservices.product_microservice import filter_products, sort_products
from mongomanager import product_collection
from schemas.product_schemas import ProductQuerySchema, ProductSchema

logger = structlog.get_logger(__name__)


def to_object_id(product_id: str) -> ObjectId:
    try:
        return ObjectId(product_id)
    except (InvalidId, TypeError):
        raise HTTPException(
            status_code=404, detail="No product found for the given id")


def serialize_product(product: dict) -> dict:
    # change id to str so python could handle it
    product["_id"] = str(product["_id"])
    return product


async def list_products(query: ProductQuerySchema):
    # the catalog is small, filtering and sorting happen in memory
    products = await product_collection.find({}).to_list(None)
    products = filter_products(products, query.search, query.price_from,
                               query.price_to, query.category)
    products = sort_products(products, query.sort_by)
    return [serialize_product(product) for product in products]


async def top_products(limit: int = 8):
    products = await product_collection.find({}).sort(
        [("rating", -1), ("num_reviews", -1)]).limit(limit).to_list(limit)
    return [serialize_product(product) for product in products]


async def get_product(product_id: str):
    product = await product_collection.find_one({"_id": to_object_id(product_id)})
    if not product:
        raise HTTPException(
            status_code=404, detail="No product found for the given id")
    return serialize_product(product)


async def create_product(product: ProductSchema):
    product_data = product.model_dump()
    product_data.update({"rating": 0, "num_reviews": 0, "reviews": []})
    result = await product_collection.insert_one(product_data)
    product_data["_id"] = str(result.inserted_id)
    logger.info("Product created", product_id=product_data["_id"], name=product.name)
    return product_data


async def update_product(product_id: str, product: ProductSchema):
    result = await product_collection.update_one(
        {"_id": to_object_id(product_id)}, {"$set": product.model_dump()})
    if result.matched_count == 0:
        raise HTTPException(
            status_code=404, detail="No product found for the given id")
    logger.info("Product updated", product_id=product_id)
    return await get_product(product_id)


async def delete_product(product_id: str):
    result = await product_collection.delete_one({"_id": to_object_id(product_id)})
    if result.deleted_count == 0:
        raise HTTPException(
            status_code=404, detail="No product found for the given id")
    logger.info("Product deleted", product_id=product_id)
    return True
