"""
Adapters between text recognizers and the receipt parser.

Nothing here runs a recognizer. These helpers convert recognizer output into
RecognizedBlock values and let callers tell a failed recognition apart from
a receipt that was read but yielded no fields.
"""

import logging
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from receipt_ocr.errors import InvalidInputError, RecognitionError
from receipt_ocr.models.receipt import BoundingBox, RecognizedBlock

logger = logging.getLogger(__name__)

TESSERACT_KEYS = ('text', 'left', 'top', 'width', 'height', 'conf')


def blocks_from_tesseract_data(data: Dict[str, List[Any]]) -> List[RecognizedBlock]:
    """
    Convert pytesseract.image_to_data(..., output_type=Output.DICT) output into blocks.

    Args:
        data: {'text': [...], 'left': [...], 'top': [...], 'width': [...],
               'height': [...], 'conf': [...]}

    Returns:
        One RecognizedBlock per non-empty word. Tesseract confidence (0-100)
        is scaled to [0, 1]; a negative value means "no confidence" and maps
        to None.

    Raises:
        InvalidInputError: if keys are missing or the lists differ in length
    """
    missing = [key for key in TESSERACT_KEYS if key not in data]
    if missing:
        raise InvalidInputError(f"tesseract data is missing keys: {', '.join(missing)}")

    n_boxes = len(data['text'])
    if any(len(data[key]) != n_boxes for key in TESSERACT_KEYS):
        raise InvalidInputError("tesseract data lists differ in length")

    blocks: List[RecognizedBlock] = []
    for i in range(n_boxes):
        text = str(data['text'][i]).strip()

        # Skip empty text
        if not text:
            continue

        try:
            conf = float(data['conf'][i])
            block = RecognizedBlock(
                text=text,
                bounding_box=BoundingBox(
                    left=data['left'][i],
                    top=data['top'][i],
                    width=data['width'][i],
                    height=data['height'][i],
                ),
                confidence=min(conf, 100.0) / 100.0 if conf >= 0 else None,
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise InvalidInputError(f"tesseract entry {i} is malformed") from e

        blocks.append(block)

    logger.debug("Converted %d tesseract boxes into %d blocks", n_boxes, len(blocks))
    return blocks


def ensure_recognized(raw_text: str, blocks: Sequence[RecognizedBlock]) -> None:
    """
    Raise RecognitionError when the recognizer produced neither text nor blocks.

    Call this at the recognizer boundary, before parsing. An image that was
    read but has no extractable fields passes; an image that could not be
    read at all does not.
    """
    if (raw_text or '').strip():
        return
    if any(block.text.strip() for block in blocks):
        return
    raise RecognitionError("no text was recognized in the image")
