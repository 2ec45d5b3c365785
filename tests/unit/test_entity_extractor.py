"""Unit tests for the regex entity extractor."""

import pytest

from mercury_ci.extractors.entity_patterns import (
    EXTRACTORS,
    EntityExtractor,
    extract_account_numbers,
    extract_company_numbers,
    extract_currencies,
    extract_dates,
    extract_emails,
    extract_invoice_numbers,
    extract_ni_numbers,
    extract_organisations,
    extract_people,
    extract_phones,
    extract_postcodes,
    extract_urls,
    extract_vat_numbers,
)
from mercury_ci.models.enums import EntityKind


class TestIndividualExtractors:
    """Each kind has its own pure extraction function."""

    def test_emails_deduplicated_case_sensitively(self):
        text = "Contact jane@example.com, JANE@example.com or jane@example.com"
        assert extract_emails(text) == ["jane@example.com", "JANE@example.com"]

    def test_emails_require_tld(self):
        assert extract_emails("user@localhost") == []

    def test_uk_phone_numbers(self):
        text = "Call 020 7946 0958 or +44 7700 900123."
        assert extract_phones(text) == ["020 7946 0958", "+44 7700 900123"]

    def test_short_numbers_are_not_phones(self):
        assert extract_phones("Room 0123") == []

    def test_postcodes(self):
        assert extract_postcodes("10 Downing Street, London SW1A 2AA") == ["SW1A 2AA"]
        assert extract_postcodes("Manchester M1 1AE") == ["M1 1AE"]

    def test_currencies(self):
        text = "Total £1,250.50, deposit $300 and fee USD 99"
        assert extract_currencies(text) == ["£1,250.50", "$300", "USD 99"]

    def test_ni_numbers(self):
        assert extract_ni_numbers("NI number AB123456C on file") == ["AB123456C"]

    def test_dates_numeric_and_long_form(self):
        text = "Issued 15/03/2024, due 1 April 2024, paid 02.05.24"
        assert extract_dates(text) == ["15/03/2024", "1 April 2024", "02.05.24"]

    def test_vat_numbers(self):
        assert extract_vat_numbers("VAT No: GB123456789") == ["GB123456789"]

    def test_company_numbers_need_label(self):
        assert extract_company_numbers("Company No: 01234567") == ["01234567"]
        assert extract_company_numbers("Reference 01234567") == []

    def test_invoice_numbers(self):
        assert extract_invoice_numbers("Invoice No: INV-2024-001") == ["INV-2024-001"]

    def test_account_numbers(self):
        assert extract_account_numbers("Account Number: 12345678") == ["12345678"]

    def test_people_with_titles(self):
        assert extract_people("Signed by Dr Sarah Jones and Mr Smith") == [
            "Dr Sarah Jones",
            "Mr Smith",
        ]

    def test_organisations(self):
        assert extract_organisations("Supplier: Acme Widgets Ltd") == ["Acme Widgets Ltd"]

    def test_urls_trailing_punctuation_stripped(self):
        text = "See https://example.com/invoice. Or visit www.acme.co.uk, today"
        assert extract_urls(text) == ["https://example.com/invoice", "www.acme.co.uk"]


class TestEntityExtractor:
    """Tests for the combined extractor."""

    def test_every_kind_present(self):
        entities = EntityExtractor().extract("Nothing interesting here")
        assert set(entities.keys()) == set(EntityKind)
        assert all(values == [] for values in entities.values())

    @pytest.mark.parametrize("value", [None, "", 42, b"bytes"])
    def test_non_string_input_gives_empty_map(self, value):
        entities = EntityExtractor().extract(value)
        assert set(entities.keys()) == set(EntityKind)
        assert EntityExtractor.total_entities(entities) == 0

    def test_order_of_first_occurrence(self):
        text = "b@example.com then a@example.com then b@example.com"
        entities = EntityExtractor().extract(text)
        assert entities[EntityKind.EMAIL] == ["b@example.com", "a@example.com"]

    def test_mixed_document(self):
        text = (
            "From: Acme Widgets Ltd\n"
            "Invoice No: INV-001\n"
            "Amount due £450.00 by 30/06/2024\n"
            "Questions to accounts@acme.co.uk or 0161 496 0000\n"
        )
        extractor = EntityExtractor()
        entities = extractor.extract(text)

        assert entities[EntityKind.INVOICE_NUMBER] == ["INV-001"]
        assert entities[EntityKind.CURRENCY] == ["£450.00"]
        assert entities[EntityKind.DATE] == ["30/06/2024"]
        assert entities[EntityKind.EMAIL] == ["accounts@acme.co.uk"]
        assert entities[EntityKind.PHONE] == ["0161 496 0000"]
        assert entities[EntityKind.ORGANISATION] == ["Acme Widgets Ltd"]
        assert extractor.count_kinds(entities) == 6

    def test_extract_kind_matches_function(self):
        text = "Pay £10 to jane@example.com"
        extractor = EntityExtractor()
        for kind, function in EXTRACTORS.items():
            assert extractor.extract_kind(text, kind) == function(text)

    def test_restricted_kinds(self):
        extractor = EntityExtractor(kinds=[EntityKind.EMAIL])
        entities = extractor.extract("Pay £10 to jane@example.com")
        assert entities[EntityKind.EMAIL] == ["jane@example.com"]
        assert entities[EntityKind.CURRENCY] == []
