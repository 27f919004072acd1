# app/core/config.py

from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Required settings
    SECRET_KEY: str
    DATABASE_URL: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALGORITHM: str = "HS256"

    # Object storage (any S3-compatible endpoint)
    STORAGE_PUBLIC_URL: str = "https://uzjaomdsjuirpbduikbz.supabase.co"
    STORAGE_BUCKET: str = "products"
    S3_ENDPOINT_URL: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-2"
    allowed_image_types: str = "image/jpeg,image/png,image/webp"
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Cart change notifications
    REDIS_URL: str = "redis://localhost:6379/0"

    # Backend call policy
    BACKEND_MAX_RETRIES: int = 3
    BACKEND_RETRY_BASE_DELAY: float = 0.1  # seconds, doubled per attempt

    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Storefront
    PRODUCT_CATEGORIES: str = "Electrical,Electronics,Lighting,Appliances,Wires & Cables"
    FEATURED_PRODUCTS_LIMIT: int = 8
    RELATED_PRODUCTS_LIMIT: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = False  # Allow lowercase env vars
        extra = "ignore"

    @property
    def categories(self) -> list:
        return [c.strip() for c in self.PRODUCT_CATEGORIES.split(",") if c.strip()]

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
