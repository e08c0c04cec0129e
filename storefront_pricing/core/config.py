"""
Pricing engine configuration management using Pydantic Settings
Holds the defaults every calculation falls back to
"""

from pydantic_settings import BaseSettings
from decimal import Decimal
from functools import lru_cache

class Settings(BaseSettings):
    """Main pricing engine settings"""

    # Application Settings
    APP_NAME: str = "Storefront Pricing"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Calculation Defaults
    PRICING_PRECISION: int = 2
    ROUNDING_ADJUSTMENT: bool = False
    ITEM_WISE_SHIPPING_TAX: bool = False
    SHIPPING_TAX_PERCENTAGE: Decimal = Decimal("0")

    # Quantity Validation
    MAX_ORDER_QUANTITY: Decimal = Decimal("9999999")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Monitoring
    METRICS_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance
    This ensures settings are loaded only once
    """
    return Settings()

# Global settings instance
settings = get_settings()
