"""
Receipt parser service for turning recognized text into a structured receipt.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional, Tuple

from pydantic import ValidationError

from receipt_ocr.config import settings
from receipt_ocr.errors import InvalidInputError
from receipt_ocr.models.receipt import OCRExtractionResult, ParsedReceipt, RecognizedBlock
from receipt_ocr.services.extractors import (
    extract_additional_data,
    extract_currency,
    extract_date,
    extract_line_items,
    extract_merchant_name,
    extract_receipt_number,
    extract_tax,
    extract_total,
    split_lines,
)
from receipt_ocr.utils.money import format_amount
from receipt_ocr.utils.scoring import aggregate_confidence

logger = logging.getLogger(__name__)


class ReceiptParser:
    """Service for parsing recognized receipt text into structured data.

    The parser holds no per-call state; one instance can be shared by any
    number of threads.
    """

    def parse(
        self,
        raw_text: str,
        blocks: Iterable[Any] = (),
        barcodes: Iterable[str] = (),
    ) -> OCRExtractionResult:
        """
        Parse recognized receipt text and extract all available fields.

        Args:
            raw_text: Full recognized text of the image
            blocks: RecognizedBlock instances (or dicts of the same shape);
                used for confidence aggregation and passed through
            barcodes: Barcode payloads, passed through unchanged

        Returns:
            OCRExtractionResult with every field that could be found; missing
            fields are None

        Raises:
            InvalidInputError: if an argument has an impossible shape
        """
        if not isinstance(raw_text, str):
            raise InvalidInputError(f"raw_text must be a str, got {type(raw_text).__name__}")

        block_tuple = self._coerce_blocks(blocks)
        barcode_tuple = self._coerce_barcodes(barcodes)

        text = raw_text.replace('\r\n', '\n').replace('\r', '\n')
        parsed_data = self.parse_text(text)
        confidence = aggregate_confidence(block_tuple)

        logger.debug(
            "Parsed receipt: merchant=%r total=%s items=%d confidence=%.2f",
            parsed_data.merchant_name,
            format_amount(parsed_data.total_amount, parsed_data.currency),
            len(parsed_data.items),
            confidence,
        )

        return OCRExtractionResult(
            raw_text=raw_text,
            confidence=confidence,
            parsed_data=parsed_data,
            barcodes=barcode_tuple,
            blocks=block_tuple,
        )

    def parse_text(self, text: str) -> ParsedReceipt:
        """Run every field extractor over the text and assemble a ParsedReceipt."""
        lines = split_lines(text)

        total_amount = extract_total(text)
        tax_amount = extract_tax(text)

        return ParsedReceipt(
            merchant_name=extract_merchant_name(lines),
            receipt_number=extract_receipt_number(text),
            date=extract_date(text),
            total_amount=total_amount,
            tax_amount=tax_amount,
            subtotal=self._derive_subtotal(total_amount, tax_amount),
            currency=extract_currency(text) or settings.DEFAULT_CURRENCY,
            items=tuple(extract_line_items(lines)),
            additional_data=extract_additional_data(text),
        )

    @staticmethod
    def _derive_subtotal(total: Optional[Decimal], tax: Optional[Decimal]) -> Optional[Decimal]:
        """
        Subtotal is never read from the text: total minus tax when both are
        known, otherwise the total itself.
        """
        if total is not None and tax is not None:
            return total - tax
        return total

    @staticmethod
    def _coerce_blocks(blocks: Iterable[Any]) -> Tuple[RecognizedBlock, ...]:
        if blocks is None or isinstance(blocks, (str, bytes, Mapping)) or not isinstance(blocks, Iterable):
            raise InvalidInputError(f"blocks must be a sequence of blocks, got {type(blocks).__name__}")

        coerced = []
        for index, block in enumerate(blocks):
            if isinstance(block, RecognizedBlock):
                coerced.append(block)
                continue
            try:
                coerced.append(RecognizedBlock.model_validate(block))
            except ValidationError as e:
                raise InvalidInputError(f"blocks[{index}] is not a valid recognized block") from e
        return tuple(coerced)

    @staticmethod
    def _coerce_barcodes(barcodes: Iterable[str]) -> Tuple[str, ...]:
        if barcodes is None or isinstance(barcodes, (str, bytes, Mapping)) or not isinstance(barcodes, Iterable):
            raise InvalidInputError(f"barcodes must be a sequence of strings, got {type(barcodes).__name__}")

        coerced = tuple(barcodes)
        for index, value in enumerate(coerced):
            if not isinstance(value, str):
                raise InvalidInputError(f"barcodes[{index}] must be a str, got {type(value).__name__}")
        return coerced


_default_parser = ReceiptParser()


def parse_receipt(
    raw_text: str,
    blocks: Iterable[Any] = (),
    barcodes: Iterable[str] = (),
) -> OCRExtractionResult:
    """Parse with a shared ReceiptParser. See ReceiptParser.parse."""
    return _default_parser.parse(raw_text, blocks, barcodes)
