"""
Exceptions raised by the receipt OCR package.

Field-level misses are never errors: an extractor that finds nothing returns
None. Only the cases below are surfaced to callers.
"""


class ReceiptOCRError(Exception):
    """Base class for receipt OCR errors."""


class InvalidInputError(ReceiptOCRError, TypeError):
    """The parser was handed input it cannot interpret structurally (caller bug)."""


class RecognitionError(ReceiptOCRError):
    """The upstream recognizer produced nothing usable for an image."""
