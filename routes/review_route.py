from fastapi import APIRouter
from schemas.review_schemas import ReviewSchema
from services.review_service import add_review

router = APIRouter(prefix="/review")


@router.post("/{product_id}", status_code=201)
async def upload_review(product_id: str, review: ReviewSchema):
    # a user can review a product once, the product rating is recomputed
    result = await add_review(product_id, review)
    return {"message": "Review added successfully", "status": "success", **result}
