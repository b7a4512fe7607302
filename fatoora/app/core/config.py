from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Fatoora Invoice QR"
    LOG_LEVEL: str = "INFO"

    # CORS origins for the invoice front-end
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Invoice totals
    VAT_RATE: Decimal = Decimal("0.15")

    # Simplified-invoice QR (TLV tags 1-5)
    QR_SELLER_NAME_PLACEHOLDER: str = "Unknown Seller"
    QR_VAT_NUMBER_PLACEHOLDER: str = "000000000000000"
    QR_TLV_OVERFLOW: Literal["reject", "truncate"] = "reject"

    # QR image rendering
    QR_BOX_SIZE: int = 10
    QR_BORDER: int = 1


settings = Settings()
