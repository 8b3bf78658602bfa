# kasir/core/config.py

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./kasir.db"
    SEED_SAMPLE_PRODUCTS: bool = True

    # Frontend
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    # Cashier
    DRAFT_NAME_PREFIX: str = "Sesi"
    QUICK_CASH_DENOMINATIONS: list[int] = [10000, 20000, 50000, 100000]
    QUICK_CASH_MAX_OPTIONS: int = 6
    CHECKOUT_RATE_LIMIT: str = "30/minute"

    # Costing (placeholder: fixed share of the total)
    COGS_RATIO: Decimal = Decimal("0.40")

    # Calendar days in reports and filters follow the store's clock
    STORE_TIMEZONE: str = "Asia/Jakarta"

    # Stock
    LOW_STOCK_THRESHOLD: int = 10
    DECREMENT_STOCK_ON_CHECKOUT: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
