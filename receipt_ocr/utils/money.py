"""
Amount parsing utilities.

Receipt amounts are read with a decimal point only:
- 1,234.56 → 1234.56
- $ 4.50 → 4.50
- 4,50 → 450 (no decimal-comma locale handling)
"""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re

from .patterns import CURRENCY_SYMBOLS

_STRIP_PATTERN = re.compile(r'C?A?\$|[' + re.escape(CURRENCY_SYMBOLS) + r',\s]', re.IGNORECASE)


def parse_amount(amount_str: str) -> Optional[Decimal]:
    """
    Parse an amount substring matched on a receipt.

    Args:
        amount_str: String containing an amount (e.g., "$1,234.56", "€ 3.20")

    Returns:
        Decimal amount or None if the cleaned string is not numeric

    Examples:
        >>> parse_amount("$1,234.56")
        Decimal('1234.56')
        >>> parse_amount("€ 3.20")
        Decimal('3.20')
        >>> parse_amount("N/A") is None
        True
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = _STRIP_PATTERN.sub('', amount_str)
    if not cleaned:
        return None

    try:
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None

    # Decimal() accepts "NaN" and "Infinity"
    if not result.is_finite():
        return None

    return result


def format_amount(amount: Optional[Decimal], currency: str = 'USD') -> str:
    """
    Format Decimal amount as money string.

    Examples:
        >>> format_amount(Decimal('1234.56'))
        '$1,234.56'
        >>> format_amount(Decimal('3.2'), 'EUR')
        '€3.20'
    """
    if amount is None:
        return 'N/A'

    symbol_map = {
        'USD': '$',
        'CAD': 'C$',
        'AUD': 'A$',
        'EUR': '€',
        'GBP': '£',
        'JPY': '¥',
        'INR': '₹',
    }
    symbol = symbol_map.get(currency.upper(), currency.upper() + ' ')

    return f"{symbol}{amount:,.2f}"
