import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RECEIPT_OCR_",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    APP_NAME: str = "receipt-ocr"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    # Parsing
    DEFAULT_CURRENCY: str = Field(default="USD", min_length=3)

    # Callers compare OCRExtractionResult.confidence against this
    MIN_CONFIDENCE_SCORE: float = 0.7


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level to the receipt_ocr logger hierarchy."""
    if settings.DEBUG and level is None:
        level = "DEBUG"
    logging.getLogger("receipt_ocr").setLevel((level or settings.LOG_LEVEL).upper())
