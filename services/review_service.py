import structlog
from fastapi import HTTPException
from microservices.product_microservice import review_summary
from mongomanager import product_collection
from schemas.review_schemas import ReviewSchema
from services.products_service import to_object_id

logger = structlog.get_logger(__name__)


async def add_review(product_id: str, review: ReviewSchema):
    # one review per user, the product rating is the mean of all reviews
    object_id = to_object_id(product_id)
    product = await product_collection.find_one({"_id": object_id})
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    reviews = product.get("reviews", [])
    if any(existing["user_id"] == review.user_id for existing in reviews):
        raise HTTPException(status_code=400, detail="Product already reviewed")
    reviews = reviews + [review.model_dump()]
    num_reviews, rating = review_summary(reviews)
    await product_collection.update_one(
        {"_id": object_id},
        {
            "$set": {
                "reviews": reviews,
                "num_reviews": num_reviews,
                "rating": rating,
            }
        }
    )
    logger.info("Review added", product_id=product_id, rating=rating)
    return {"num_reviews": num_reviews, "rating": rating}
