import os
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

import structlog
from microservices.cart_microservice import InvalidQuantity, PersistenceUnavailable, ProductNotFound
from routes.cart_route import router as cart_router
from routes.orders_route import router as orders_router
from routes.products_route import router as products_router
from routes.review_route import router as review_router

logger = structlog.get_logger(__name__)

CART_ERROR_STATUS = {
    ProductNotFound: 404,
    InvalidQuantity: 422,
    PersistenceUnavailable: 503,
}


async def cart_error_handler(request: Request, exc: Exception):
    status_code = CART_ERROR_STATUS.get(type(exc), 400)
    logger.warning("Cart request failed", path=request.url.path, error=str(exc), status_code=status_code)
    return JSONResponse(status_code=status_code, content={"status": "failure", "detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(title="Storefront API")

    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(products_router)
    app.include_router(review_router)

    for error in CART_ERROR_STATUS:
        app.add_exception_handler(error, cart_error_handler)

    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in origins],  # frontend URLs
        allow_credentials=True,  # Allow cookies & auth headers
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def connection():
        return {"message": "Connected Successfully"}

    return app


app = create_app()
