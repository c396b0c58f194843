"""
Pydantic models for recognized input and parsed receipts.

Every model is frozen: a parse call builds fresh instances and nothing
mutates them afterwards.
"""

from datetime import date as Date
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from receipt_ocr.config import settings


class BoundingBox(BaseModel):
    """Rectangle reported by the recognizer, in image pixels."""
    model_config = ConfigDict(frozen=True)

    left: float
    top: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class RecognizedBlock(BaseModel):
    """A block of recognized text. Read-only input to the parser."""
    model_config = ConfigDict(frozen=True)

    text: str
    bounding_box: Optional[BoundingBox] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class LineItem(BaseModel):
    """Receipt line item."""
    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal = Field(gt=0)
    quantity: Decimal = Decimal('1')

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('line item name must not be empty')
        return value


class ParsedReceipt(BaseModel):
    """Structured fields extracted from receipt text."""
    model_config = ConfigDict(frozen=True)

    merchant_name: Optional[str] = None
    receipt_number: Optional[str] = None
    date: Optional[Date] = None
    total_amount: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    currency: str = Field(default='USD', min_length=1)
    items: Tuple[LineItem, ...] = ()
    additional_data: Dict[str, str] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dict: dates as ISO strings, amounts as strings."""
        return self.model_dump(mode='json')


class OCRExtractionResult(BaseModel):
    """Result of one extraction call."""
    model_config = ConfigDict(frozen=True)

    raw_text: str
    confidence: float = Field(ge=0.0, le=1.0)
    parsed_data: ParsedReceipt
    barcodes: Tuple[str, ...] = ()
    blocks: Tuple[RecognizedBlock, ...] = ()

    def is_low_confidence(self, threshold: Optional[float] = None) -> bool:
        """
        Compare the aggregate confidence against a threshold.

        Falls back to settings.MIN_CONFIDENCE_SCORE. Purely advisory; the
        parsed fields are populated regardless.
        """
        if threshold is None:
            threshold = settings.MIN_CONFIDENCE_SCORE
        return self.confidence < threshold

    def to_receipt_fields(self) -> Dict[str, Any]:
        """
        Map the result onto the column names of a stored receipt record.

        Absent fields map to None. Amounts stay Decimal.
        """
        parsed = self.parsed_data
        return {
            'receipt_number': parsed.receipt_number,
            'receipt_date': parsed.date.isoformat() if parsed.date else None,
            'subtotal': parsed.subtotal,
            'tax_amount': parsed.tax_amount,
            'total_amount': parsed.total_amount,
            'currency': parsed.currency,
            'ocr_text': self.raw_text,
            'ocr_confidence': self.confidence,
            'ocr_extracted_data': parsed.to_dict(),
        }
