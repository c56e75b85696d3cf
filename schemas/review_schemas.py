from pydantic import BaseModel, Field


class ReviewSchema(BaseModel):
    name: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


__all__ = ["ReviewSchema"]
