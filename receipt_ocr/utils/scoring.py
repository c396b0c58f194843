"""
Aggregate recognition confidence for a receipt.

The score is informational: it never decides whether a field is populated.
"""

from typing import Iterable

from receipt_ocr.models.receipt import RecognizedBlock

__all__ = ['aggregate_confidence', 'block_confidences']


def block_confidences(blocks: Iterable[RecognizedBlock]) -> list[float]:
    """Confidence values of the blocks that carry one, in input order."""
    return [block.confidence for block in blocks if block.confidence is not None]


def aggregate_confidence(blocks: Iterable[RecognizedBlock]) -> float:
    """
    Average the confidence of all blocks that report one.

    Blocks without a confidence are left out of both the sum and the count.

    Args:
        blocks: Recognized blocks for one image

    Returns:
        Mean confidence in [0.0, 1.0], or 0.0 when no block has a confidence
    """
    values = block_confidences(blocks)
    if not values:
        return 0.0

    score = sum(values) / len(values)

    # Clamp to [0.0, 1.0]
    return max(0.0, min(1.0, score))
