"""
Tests for the individual field extractors.

Each extractor is exercised on small synthetic snippets modelled on printed
till receipts.
"""

from datetime import date
from decimal import Decimal

import pytest

from receipt_ocr.models.receipt import LineItem
from receipt_ocr.services.extractors import (
    extract_additional_data,
    extract_amounts,
    extract_currency,
    extract_date,
    extract_line_items,
    extract_merchant_name,
    extract_receipt_number,
    extract_tax,
    extract_total,
    is_numeric_line,
    parse_date_string,
    split_lines,
)


class TestMerchantName:
    """Merchant name comes from the first five non-empty lines."""

    def test_first_substantial_line(self):
        lines = ["Joe's Coffee", "Receipt #A1234", "03/14/2024"]
        assert extract_merchant_name(lines) == "Joe's Coffee"

    def test_skips_short_and_keyword_lines(self):
        lines = ["AB", "Shop", "SALES RECEIPT", "Tax Invoice", "Corner Market"]
        assert extract_merchant_name(lines) == "Corner Market"

    def test_skips_punctuation_only_lines(self):
        assert extract_merchant_name(["------", "Corner Market"]) == "Corner Market"

    def test_blank_lines_do_not_count_towards_window(self):
        lines = ["", "   ", "12345", "", "Corner Market"]
        assert extract_merchant_name(lines) == "Corner Market"

    def test_window_is_five_lines(self):
        """A plausible name on line 6 is out of reach."""
        lines = [
            "12345",
            "RECEIPT",
            "03/14/2024",
            "Receipt copy 2",
            "(555) 123-4567",
            "Acme Hardware Store",
        ]
        assert extract_merchant_name(lines) is None

    def test_name_with_digits_is_kept(self):
        assert extract_merchant_name(["7-Eleven Store 1024"]) == "7-Eleven Store 1024"

    def test_no_lines(self):
        assert extract_merchant_name([]) is None


class TestNumericLine:

    @pytest.mark.parametrize("line", ["12345", "03/14/2024", "(555) 123-4567", "$4.50", "# 0012"])
    def test_numeric(self, line):
        assert is_numeric_line(line)

    @pytest.mark.parametrize("line", ["Joe's Coffee", "7-Eleven", "------", ""])
    def test_not_numeric(self, line):
        assert not is_numeric_line(line)


class TestReceiptNumber:

    @pytest.mark.parametrize("text, expected", [
        ("Joe's Coffee\nReceipt #A1234", "A1234"),
        ("Invoice No: INV-2024-001", "INV-2024-001"),
        ("Receipt Number: 12345", "12345"),
        ("Receipt No. 5521", "5521"),
        ("ORDER 88812", "88812"),
    ])
    def test_labelled_numbers(self, text, expected):
        assert extract_receipt_number(text) == expected

    def test_hash_fallback(self):
        """"Order Summary" has no digit, so the bare #token is used."""
        assert extract_receipt_number("Order Summary\nTable #12") == "12"

    def test_label_does_not_reach_next_line(self):
        assert extract_receipt_number("RECEIPT\n2024 Spring Sale") is None

    def test_no_number(self):
        assert extract_receipt_number("Thanks for shopping") is None


class TestDate:

    @pytest.mark.parametrize("text, expected", [
        ("03/14/2024", date(2024, 3, 14)),
        ("Date: 14/03/2024", date(2024, 3, 14)),
        ("3-4-24", date(2024, 3, 4)),
        ("2024-03-14 10:22", date(2024, 3, 14)),
        ("2024/3/9", date(2024, 3, 9)),
        ("March 14, 2024", date(2024, 3, 14)),
        ("Mar. 14 2024", date(2024, 3, 14)),
        ("Sept 3rd, 2024", date(2024, 9, 3)),
        ("14 March 2024", date(2024, 3, 14)),
        ("1st Feb 2025", date(2025, 2, 1)),
    ])
    def test_supported_shapes(self, text, expected):
        assert extract_date(text) == expected

    def test_numeric_rule_wins_over_earlier_text(self):
        """Rule order decides, not position in the text."""
        text = "Printed March 1, 2023\nVisit 03/04/2025"
        assert extract_date(text) == date(2025, 3, 4)

    def test_unparseable_first_match_leaves_date_absent(self):
        """A date-shaped match that is not a calendar date stops the search."""
        text = "Ref 99/99/2024\nMarch 14, 2024"
        assert extract_date(text) is None

    def test_no_date(self):
        assert extract_date("Latte 4.50\nTOTAL 4.50") is None

    def test_parse_date_string_collapses_noise(self):
        assert parse_date_string("03/14/2024x") == date(2024, 3, 14)

    def test_parse_date_string_rejects_non_dates(self):
        assert parse_date_string("not a date") is None
        assert parse_date_string("13/13/2024") is None


class TestAmounts:

    def test_total_and_tax(self):
        text = "Subtotal 20.00\nTax 3.20\nTotal 23.20"
        assert extract_total(text) == Decimal("23.20")
        assert extract_tax(text) == Decimal("3.20")

    def test_spaced_subtotal_is_not_total(self):
        assert extract_total("Sub Total 20.00\nTOTAL 23.20") == Decimal("23.20")

    @pytest.mark.parametrize("text, expected", [
        ("TOTAL $4.50", Decimal("4.50")),
        ("Amount Due: $1,204.50", Decimal("1204.50")),
        ("Balance 5.00", Decimal("5.00")),
        ("23.20 TOTAL", Decimal("23.20")),
        ("TOTAL CA$6.99", Decimal("6.99")),
        ("Total: C$ 12.00", Decimal("12.00")),
    ])
    def test_total_labels(self, text, expected):
        assert extract_total(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("TAX: €3.20", Decimal("3.20")),
        ("VAT 1.50", Decimal("1.50")),
        ("GST: 1.19", Decimal("1.19")),
        ("0.21 tax", Decimal("0.21")),
    ])
    def test_tax_labels(self, text, expected):
        assert extract_tax(text) == expected

    def test_total_and_tax_are_independent(self):
        assert extract_amounts("VAT 3.00") == {"total": None, "tax": Decimal("3.00")}
        assert extract_amounts("Total 9.99") == {"total": Decimal("9.99"), "tax": None}

    def test_label_without_amount(self):
        assert extract_total("Total: $") is None
        assert extract_tax("Tax ID: AB-99") is None


class TestCurrency:

    @pytest.mark.parametrize("text, expected", [
        ("TOTAL $4.50", "USD"),
        ("TOTAL: €23.20", "EUR"),
        ("Total £5.00", "GBP"),
        ("Total ₹250", "INR"),
        ("Total ¥1200", "JPY"),
        ("Total 6.99 CAD", "CAD"),
        ("Total CA$6.99", "CAD"),
        ("Total 12.00 eur", "EUR"),
        ("Total 12.00 AUD", "AUD"),
        ("Total A$12.50", "AUD"),
    ])
    def test_detects_currency(self, text, expected):
        assert extract_currency(text) == expected

    def test_rule_order_breaks_ties(self):
        """Symbols are checked in a fixed order; "$" comes before "€"."""
        assert extract_currency("Paid €3.20 (approx $3.50)") == "USD"

    def test_codes_need_word_boundaries(self):
        assert extract_currency("Made in Europe 5.00") is None

    def test_no_currency(self):
        assert extract_currency("Total 12.00") is None


class TestLineItems:

    def test_extracts_name_and_price(self):
        lines = split_lines("Joe's Coffee\nReceipt #A1234\n03/14/2024\nLatte 4.50\nTOTAL $4.50")
        assert extract_line_items(lines) == [
            LineItem(name="Latte", price=Decimal("4.50"), quantity=Decimal("1")),
        ]

    def test_header_and_footer_lines_are_skipped(self):
        lines = [
            "TOTAL 45.67",
            "Subtotal 40.00",
            "Tax 5.67",
            "Visa Card 45.67",
            "Cash 50.00",
            "Change 4.33",
            "Thank you 1",
        ]
        assert extract_line_items(lines) == []

    def test_non_positive_and_malformed_prices_are_skipped(self):
        lines = ["Muffin 0.00", "Refund -2.00", "Napkins", "Bagel $ 2.25"]
        items = extract_line_items(lines)
        assert [(i.name, i.price) for i in items] == [("Bagel", Decimal("2.25"))]

    def test_dated_item_name_is_kept(self):
        items = extract_line_items(["Concert 12/05/24 show 25.00"])
        assert items == [
            LineItem(name="Concert 12/05/24 show", price=Decimal("25.00"), quantity=Decimal("1")),
        ]

    def test_grouped_price_and_multiword_name(self):
        items = extract_line_items(["Espresso Machine Deluxe 1,299.00"])
        assert items[0].name == "Espresso Machine Deluxe"
        assert items[0].price == Decimal("1299.00")
        assert items[0].quantity == Decimal("1")

    def test_empty(self):
        assert extract_line_items([]) == []


class TestAdditionalData:

    def test_all_contact_fields(self):
        text = "Tel: +1 (555) 123-4567\nhello@joescoffee.com\nwww.joescoffee.com"
        assert extract_additional_data(text) == {
            "phone": "+1 (555) 123-4567",
            "email": "hello@joescoffee.com",
            "website": "joescoffee.com",
        }

    def test_email_domain_is_not_a_website(self):
        assert extract_additional_data("Contact: info@shop.com") == {"email": "info@shop.com"}

    def test_website_with_scheme_and_path(self):
        data = extract_additional_data("Survey at https://shop.example.org/feedback")
        assert data == {"website": "shop.example.org"}

    def test_phone_label_needs_word_boundary(self):
        assert "phone" not in extract_additional_data("Hotel 5.00")

    def test_nothing_found(self):
        assert extract_additional_data("Latte 4.50") == {}
