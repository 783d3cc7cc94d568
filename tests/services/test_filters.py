"""
Tests for invoice filter normalization and query construction.
"""

from unittest.mock import MagicMock

from backend.services.filters import (
    CURRENCY_PATH,
    DATE_PATH,
    TYPE_PATH,
    VENDOR_PATH,
    InvoiceFilter,
    apply_invoice_filter,
    build_search_expression,
)


def _fluent_query():
    query = MagicMock()
    for method in ("eq", "gte", "lte", "or_"):
        getattr(query, method).return_value = query
    return query


class TestInvoiceFilterFromParams:
    """Normalization of raw request parameters."""

    def test_empty_values_are_dropped(self):
        filters = InvoiceFilter.from_params(vendor="", currency="   ", invoice_type=None, search="")

        assert filters == InvoiceFilter()
        assert filters.is_empty

    def test_values_are_stripped(self):
        filters = InvoiceFilter.from_params(vendor="  BuildSmart ", currency="USD")

        assert filters.vendor == "BuildSmart"
        assert filters.currency == "USD"
        assert not filters.is_empty

    def test_full_date_range_is_kept(self):
        filters = InvoiceFilter.from_params(start_date="2023-01-01", end_date="2023-01-31")

        assert filters.has_date_range
        assert filters.start_date == "2023-01-01"
        assert filters.end_date == "2023-01-31"

    def test_start_date_alone_is_ignored(self):
        filters = InvoiceFilter.from_params(start_date="2023-01-01")

        assert not filters.has_date_range
        assert filters.start_date is None
        assert filters.end_date is None
        assert filters.is_empty

    def test_end_date_alone_is_ignored(self):
        filters = InvoiceFilter.from_params(end_date="2023-01-31")

        assert filters.start_date is None
        assert filters.end_date is None


class TestBuildSearchExpression:

    def test_matches_invoice_number_or_vendor(self):
        expression = build_search_expression("smart")

        assert expression == (
            'invoice_header->>invoice_num.ilike."*smart*",'
            'invoice_header->>vendor_name.ilike."*smart*"'
        )

    def test_quotes_reserved_characters(self):
        expression = build_search_expression('a,b"c')

        assert '"*a,b\\"c*"' in expression

    def test_like_wildcards_match_literally(self):
        assert '"*INV\\\\_2023*"' in build_search_expression("INV_2023")
        assert '"*100\\\\%*"' in build_search_expression("100%")

    def test_backslash_is_escaped_before_quoting(self):
        assert '"*a\\\\\\\\b*"' in build_search_expression("a\\b")


class TestApplyInvoiceFilter:
    """Conditions added to the PostgREST query."""

    def test_empty_filter_adds_no_conditions(self):
        query = _fluent_query()

        result = apply_invoice_filter(query, InvoiceFilter())

        assert result is query
        query.eq.assert_not_called()
        query.gte.assert_not_called()
        query.or_.assert_not_called()

    def test_exact_match_fields(self):
        query = _fluent_query()
        filters = InvoiceFilter.from_params(vendor="BuildSmart", currency="USD", invoice_type="Credit")

        apply_invoice_filter(query, filters)

        query.eq.assert_any_call(VENDOR_PATH, "BuildSmart")
        query.eq.assert_any_call(CURRENCY_PATH, "USD")
        query.eq.assert_any_call(TYPE_PATH, "Credit")
        assert query.eq.call_count == 3

    def test_date_range_is_inclusive(self):
        query = _fluent_query()
        filters = InvoiceFilter.from_params(start_date="2023-01-01", end_date="2023-01-31")

        apply_invoice_filter(query, filters)

        query.gte.assert_called_once_with(DATE_PATH, "2023-01-01")
        query.lte.assert_called_once_with(DATE_PATH, "2023-01-31")

    def test_partial_date_range_adds_no_date_condition(self):
        query = _fluent_query()

        apply_invoice_filter(query, InvoiceFilter.from_params(start_date="2023-01-01"))

        query.gte.assert_not_called()
        query.lte.assert_not_called()

    def test_search_uses_or_expression(self):
        query = _fluent_query()

        apply_invoice_filter(query, InvoiceFilter.from_params(search="INV-2023"))

        query.or_.assert_called_once_with(build_search_expression("INV-2023"))
