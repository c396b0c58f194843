"""
Pattern library for receipt field extraction.

Every rule list is an ordered tuple. Extractors walk a list front to back and
accept the first rule that matches, so list order is the tie-break policy.
All data here is module-level and immutable; it is shared read-only by every
parse call.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))

    def search(self, text: str) -> Optional[re.Match]:
        return self.compiled.search(text)


CURRENCY_SYMBOLS = '£$€₹¥'

# Optional currency symbol (C$, CA$ and A$ included), then digits with optional
# grouping commas and decimals.
# Never starts inside a longer number. Decimal comma is not supported: "4,50" reads as 450.
AMOUNT = r'(?:C?A?\$|[£$€₹¥])?\s*(?<![\d,.])\d[\d,]*(?:\.\d+)?'

_MONTH = (
    r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?'
    r'|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?'
)

DATE_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='day_month_year',
        pattern=r'(?<!\d)(\d{1,2}[-/]\d{1,2}[-/]\d{2,4})(?!\d)',
        example='03/14/2024',
        notes='Numeric D/M/Y shape; month-first is tried before day-first when parsing',
    ),
    PatternSpec(
        name='year_month_day',
        pattern=r'(?<!\d)(\d{2,4}[-/]\d{1,2}[-/]\d{1,2})(?!\d)',
        example='2024-03-14',
    ),
    PatternSpec(
        name='month_day_year',
        pattern=rf'\b({_MONTH}\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}})(?!\d)',
        example='March 14, 2024',
    ),
    PatternSpec(
        name='day_month_year_text',
        pattern=rf'(?<!\d)(\d{{1,2}}(?:st|nd|rd|th)?\s+{_MONTH}\s+\d{{4}})(?!\d)',
        example='14 March 2024',
    ),
)

TOTAL_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='total_label_first',
        pattern=rf'(?<!sub)(?<!sub\s)(?<!sub-)\b(?:total|amount\s+due|balance)[ \t:]*({AMOUNT})',
        example='TOTAL: $23.20',
        notes='Label before amount; subtotal lines never count as the total',
    ),
    PatternSpec(
        name='total_amount_first',
        pattern=rf'({AMOUNT})[ \t]*\btotal\b',
        example='23.20 TOTAL',
    ),
)

TAX_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='tax_label_first',
        pattern=rf'\b(?:tax|vat|gst)[ \t:]*({AMOUNT})',
        example='TAX: €3.20',
    ),
    PatternSpec(
        name='tax_amount_first',
        pattern=rf'({AMOUNT})[ \t]*\b(?:tax|vat|gst)\b',
        example='3.20 VAT',
    ),
)

# Ordered (rule, ISO code) pairs. Symbols first, then whole-word codes.
CURRENCY_PATTERNS: Tuple[Tuple[PatternSpec, str], ...] = (
    (PatternSpec(name='cad_dollar', pattern=r'\bCA?\$', example='CA$6.99', flags=0), 'CAD'),
    (PatternSpec(name='aud_dollar', pattern=r'\bA\$', example='A$12.50', flags=0), 'AUD'),
    (PatternSpec(name='dollar', pattern=r'\$', example='$4.50'), 'USD'),
    (PatternSpec(name='pound', pattern=r'£', example='£12.00'), 'GBP'),
    (PatternSpec(name='euro', pattern=r'€', example='€3.20'), 'EUR'),
    (PatternSpec(name='rupee', pattern=r'₹', example='₹250'), 'INR'),
    (PatternSpec(name='yen', pattern=r'¥', example='¥1200'), 'JPY'),
    (PatternSpec(name='usd_code', pattern=r'\bUSD\b', example='12.00 USD'), 'USD'),
    (PatternSpec(name='gbp_code', pattern=r'\bGBP\b', example='12.00 GBP'), 'GBP'),
    (PatternSpec(name='eur_code', pattern=r'\bEUR\b', example='12.00 EUR'), 'EUR'),
    (PatternSpec(name='inr_code', pattern=r'\bINR\b', example='250 INR'), 'INR'),
    (PatternSpec(name='jpy_code', pattern=r'\bJPY\b', example='1200 JPY'), 'JPY'),
    (PatternSpec(name='cad_code', pattern=r'\bCAD\b', example='6.99 CAD'), 'CAD'),
    (PatternSpec(name='aud_code', pattern=r'\bAUD\b', example='6.99 AUD'), 'AUD'),
)

RECEIPT_NUMBER_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='labelled_number',
        pattern=r'\b(?:receipt|bill|invoice|ref|order)\b(?:[ \t]*(?:no\.?|number|#))?[ \t:]*((?=[a-z\-]*\d)[a-z0-9\-]+)',
        example='Receipt #A1234',
        notes='Token must contain a digit so words like "Order Summary" are ignored',
    ),
    PatternSpec(
        name='hash_number',
        pattern=r'#(\w+)',
        example='#98765',
    ),
)

PHONE_PATTERN = PatternSpec(
    name='phone',
    pattern=r'\b(?:tel|phone|call)\b[ \t.:]*(\+?[\d \t\-()]*\d)',
    example='Tel: +1 (555) 123-4567',
)

EMAIL_PATTERN = PatternSpec(
    name='email',
    pattern=r'(?<![a-zA-Z0-9._%+-])([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})',
    example='hello@joescoffee.com',
)

WEBSITE_PATTERN = PatternSpec(
    name='website',
    pattern=r'(?<![@\w.-])(?:www\.|https?://)?((?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,})(?![\w@-])',
    example='www.joescoffee.com',
    notes='Never matches the domain part of an email address',
)

LINE_ITEM_PATTERN = PatternSpec(
    name='line_item',
    pattern=rf'^(.+?)\s+({AMOUNT})$',
    example='Latte 4.50',
)

HEADER_FOOTER_KEYWORDS: Tuple[str, ...] = (
    'receipt', 'thank you', 'total', 'subtotal', 'tax', 'change', 'card', 'cash',
)

MERCHANT_SKIP_KEYWORDS: Tuple[str, ...] = ('receipt', 'invoice', 'bill')

MERCHANT_SCAN_LINES = 5

# Digits with the punctuation that shows up around numbers on receipts.
NUMERIC_LINE_PATTERN = re.compile(r'[\d\s.,:;/\-#+()%' + re.escape(CURRENCY_SYMBOLS) + r']+')
