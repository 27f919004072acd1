from fastapi.openapi.utils import get_openapi

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.db.session import engine, Base
from app.models import models, order, product  # noqa: F401  register tables
from app.api.routes_auth import router as auth_router
from app.api.routes_profile import router as profile_router
from app.api.routes_product import router as product_router
from app.api.routes_cart import router as cart_router
from app.api.routes_favorite import router as favorite_router
from app.api.routes_order import router as order_router
from app.api.routes_feedback import router as feedback_router
from app.api.routes_admin import router as admin_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="electromart-api",
    description="Storefront catalog, cart, cash-on-delivery checkout, order tracking and back office",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

Base.metadata.create_all(bind=engine)

# Register endpoints
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(profile_router, prefix="/api/profile", tags=["Profile"])
app.include_router(product_router, prefix="/api/products", tags=["Product"])
app.include_router(cart_router, prefix="/api/cart", tags=["Cart"])
app.include_router(favorite_router, prefix="/api/favorites", tags=["Favorite"])
app.include_router(order_router, prefix="/api/orders", tags=["Order"])
app.include_router(feedback_router, prefix="/api/feedback", tags=["Feedback"])
app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])


# 👇 Custom OpenAPI with Bearer Auth
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="ElectroMart API",
        version="1.0.0",
        description="Storefront and back-office API.",
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    for path in openapi_schema["paths"].values():
        for method in path.values():
            method["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
