# storefront/core/config.py

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Required settings
    SECRET_KEY: str
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Token settings
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ALGORITHM: str = "HS256"

    # Roles
    USER_ROLE: str = "user"
    ADMIN_ROLE: str = "admin"

    # Security settings
    PASSWORD_MIN_LENGTH: int = 6

    # Business rules
    FEATURED_PRODUCTS_LIMIT: int = 5
    ENFORCE_STOCK_ON_CART: bool = True

    # Runtime
    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = False  # Allow lowercase env vars
        extra = "ignore"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def roles(self) -> List[str]:
        return [self.USER_ROLE, self.ADMIN_ROLE]


settings = Settings()
