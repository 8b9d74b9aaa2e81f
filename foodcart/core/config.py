"""Application configuration."""

from decimal import Decimal
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "foodcart API"
    app_env: str = getenv("APP_ENV", "dev")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./foodcart.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    local_timezone: str = getenv("LOCAL_TIMEZONE", "Asia/Karachi")
    routing_base_url: str = getenv("ROUTING_BASE_URL", "https://router.project-osrm.org")
    routing_timeout_secs: float = float(getenv("ROUTING_TIMEOUT_SECS", "5.0"))
    pricing_cache_ttl_secs: float = float(getenv("PRICING_CACHE_TTL_SECS", "600"))
    default_base_delivery_fee: Decimal = Decimal(getenv("DEFAULT_BASE_DELIVERY_FEE", "75"))
    default_delivery_fee_per_km: Decimal = Decimal(getenv("DEFAULT_DELIVERY_FEE_PER_KM", "25"))


settings: Settings = Settings()
