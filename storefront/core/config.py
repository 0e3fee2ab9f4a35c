# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET (HS256 signing secret for access tokens)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (only used by image upload)
      - SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD (only used by storefront-seed)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # Access tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Asset host (Supabase Storage)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"
    STORAGE_FOLDER: str = "products"

    # Carts untouched for this long are dropped
    CART_TTL_DAYS: int = 30

    # First admin account, created by storefront-seed
    SEED_ADMIN_EMAIL: str = "admin@storefront.shop"
    SEED_ADMIN_PASSWORD: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
