"""
Field extractors for receipt text.

Each extractor is a plain function from text (or its lines) to an optional
value. Extractors share no state, so they can run in any order and any number
of parses can run at once. A miss is a normal outcome and returns None (or an
empty collection); it is never raised.
"""

import re
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Sequence

from receipt_ocr.models.receipt import LineItem
from receipt_ocr.utils.money import parse_amount
from receipt_ocr.utils.patterns import (
    CURRENCY_PATTERNS,
    DATE_PATTERNS,
    EMAIL_PATTERN,
    HEADER_FOOTER_KEYWORDS,
    LINE_ITEM_PATTERN,
    MERCHANT_SCAN_LINES,
    MERCHANT_SKIP_KEYWORDS,
    NUMERIC_LINE_PATTERN,
    PHONE_PATTERN,
    RECEIPT_NUMBER_PATTERNS,
    TAX_PATTERNS,
    TOTAL_PATTERNS,
    WEBSITE_PATTERN,
    PatternSpec,
)

logger = logging.getLogger(__name__)

# Month-first before day-first, four-digit years before two-digit years.
NUMERIC_DATE_FORMATS = (
    '%m/%d/%Y', '%d/%m/%Y', '%Y/%m/%d',
    '%m-%d-%Y', '%d-%m-%Y', '%Y-%m-%d',
    '%m/%d/%y', '%d/%m/%y', '%y/%m/%d',
    '%m-%d-%y', '%d-%m-%y', '%y-%m-%d',
)

TEXT_DATE_FORMATS = (
    '%B %d, %Y', '%b %d, %Y',
    '%B %d %Y', '%b %d %Y',
    '%d %B %Y', '%d %b %Y',
)


def split_lines(text: str) -> List[str]:
    """Non-empty lines of the text, trimmed."""
    return [line.strip() for line in text.split('\n') if line.strip()]


def _contains_keyword(line: str, keywords: Iterable[str]) -> bool:
    lowered = line.casefold()
    return any(keyword in lowered for keyword in keywords)


def is_numeric_line(line: str) -> bool:
    """True for lines made only of digits and number punctuation ("03/14/2024", "(555) 123-4567")."""
    return bool(re.search(r'\d', line)) and NUMERIC_LINE_PATTERN.fullmatch(line) is not None


def _first_match(patterns: Sequence[PatternSpec], text: str) -> Optional[re.Match]:
    for spec in patterns:
        match = spec.search(text)
        if match:
            logger.debug("Pattern %s matched %r", spec.name, match.group(0))
            return match
    return None


def extract_merchant_name(lines: Sequence[str]) -> Optional[str]:
    """
    Pick the merchant name from the receipt header.

    Only the first few non-empty lines are considered. Short lines, purely
    numeric lines and document labels ("receipt", "invoice", "bill") are
    skipped; the first remaining line longer than five characters that
    contains a letter wins.

    Args:
        lines: Receipt lines in reading order

    Returns:
        Merchant name or None
    """
    candidates = [line.strip() for line in lines if line.strip()][:MERCHANT_SCAN_LINES]

    for line in candidates:
        if len(line) < 3 or is_numeric_line(line) or _contains_keyword(line, MERCHANT_SKIP_KEYWORDS):
            continue

        if len(line) > 5 and re.search(r'[^\W\d_]', line):
            return line

    return None


def extract_receipt_number(text: str) -> Optional[str]:
    """
    Extract a receipt/invoice/order number.

    Labelled numbers ("Receipt #A1234", "Invoice No: 88-12") are preferred over
    a bare "#token".
    """
    try:
        match = _first_match(RECEIPT_NUMBER_PATTERNS, text)
        return match.group(1) if match else None
    except (re.error, IndexError):
        logger.warning("Error extracting receipt number", exc_info=True)
        return None


def parse_date_string(date_str: str) -> Optional[date]:
    """
    Parse a matched date substring into a calendar date.

    Tries the textual and numeric formats as written first. If none fit, the
    string is collapsed to digits and "-"/"/" separators and the numeric
    formats are tried again.

    Args:
        date_str: Date string in one of the supported shapes

    Returns:
        date or None
    """
    candidate = re.sub(r'(\d)(?:st|nd|rd|th)\b', r'\1', date_str.strip(), flags=re.IGNORECASE)
    candidate = re.sub(r'\s+', ' ', candidate)
    candidate = re.sub(r'(?<=[A-Za-z])\.', '', candidate)
    candidate = re.sub(r'\bsept\b', 'Sep', candidate, flags=re.IGNORECASE)

    for fmt in TEXT_DATE_FORMATS + NUMERIC_DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue

    collapsed = re.sub(r'[^\d\-/]', '', date_str)
    if collapsed and collapsed != candidate:
        for fmt in NUMERIC_DATE_FORMATS:
            try:
                return datetime.strptime(collapsed, fmt).date()
            except ValueError:
                continue

    return None


def extract_date(text: str) -> Optional[date]:
    """
    Extract the receipt date.

    The first date rule that matches decides; if its text does not parse into
    a calendar date the field is absent and later rules are not consulted.
    """
    try:
        match = _first_match(DATE_PATTERNS, text)
        if not match:
            return None

        parsed = parse_date_string(match.group(1))
        if parsed is None:
            logger.debug("Date-shaped text %r did not parse", match.group(1))
        return parsed

    except (re.error, ValueError, OverflowError):
        logger.warning("Error extracting date", exc_info=True)
        return None


def _extract_labelled_amount(patterns: Sequence[PatternSpec], text: str) -> Optional[Decimal]:
    for spec in patterns:
        match = spec.search(text)
        if not match:
            continue

        amount = parse_amount(match.group(1))
        if amount is not None:
            logger.debug("Pattern %s matched amount %s", spec.name, amount)
            return amount

    return None


def extract_total(text: str) -> Optional[Decimal]:
    """Extract the receipt total. Label-before-amount is tried before amount-before-label."""
    try:
        return _extract_labelled_amount(TOTAL_PATTERNS, text)
    except (re.error, InvalidOperation):
        logger.warning("Error extracting total", exc_info=True)
        return None


def extract_tax(text: str) -> Optional[Decimal]:
    """Extract the flat tax amount printed on the receipt (tax, VAT or GST)."""
    try:
        return _extract_labelled_amount(TAX_PATTERNS, text)
    except (re.error, InvalidOperation):
        logger.warning("Error extracting tax", exc_info=True)
        return None


def extract_amounts(text: str) -> Dict[str, Optional[Decimal]]:
    """Total and tax, extracted independently of each other."""
    return {
        'total': extract_total(text),
        'tax': extract_tax(text),
    }


def extract_currency(text: str) -> Optional[str]:
    """
    Detect the receipt currency.

    Rules are tried in order and the first symbol or code found anywhere in
    the text wins.

    Returns:
        ISO 4217 code or None; the caller applies the default
    """
    try:
        for spec, code in CURRENCY_PATTERNS:
            if spec.search(text):
                logger.debug("Currency %s detected by %s", code, spec.name)
                return code
        return None
    except re.error:
        logger.warning("Error extracting currency", exc_info=True)
        return None


def is_header_or_footer_line(line: str) -> bool:
    return _contains_keyword(line, HEADER_FOOTER_KEYWORDS)


def extract_line_items(lines: Sequence[str]) -> List[LineItem]:
    """
    Extract "name  price" line items.

    Lines carrying header/footer keywords (total, tax, cash, ...) are
    skipped, as are lines whose trailing amount is not positive. Partial
    results are normal.
    """
    items: List[LineItem] = []

    for line in lines:
        line = line.strip()
        if not line or is_header_or_footer_line(line):
            continue

        match = LINE_ITEM_PATTERN.compiled.match(line)
        if not match:
            continue

        name = match.group(1).strip()
        price = parse_amount(match.group(2))
        if not name or price is None or price <= 0:
            continue

        items.append(LineItem(name=name, price=price, quantity=Decimal('1')))

    if items:
        logger.debug("Found %d line item(s)", len(items))
    return items


def extract_additional_data(text: str) -> Dict[str, str]:
    """
    Extract contact details (phone, email, website).

    Each field is looked for independently; any combination may be present.
    """
    data: Dict[str, str] = {}

    try:
        phone_match = PHONE_PATTERN.search(text)
        if phone_match:
            data['phone'] = phone_match.group(1).strip()

        email_match = EMAIL_PATTERN.search(text)
        if email_match:
            data['email'] = email_match.group(1)

        website_match = WEBSITE_PATTERN.search(text)
        if website_match:
            data['website'] = website_match.group(1)

    except re.error:
        logger.warning("Error extracting contact details", exc_info=True)

    return data
