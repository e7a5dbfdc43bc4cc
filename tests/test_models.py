"""Tests for Pydantic models."""

import math

import pytest
from pydantic import ValidationError

from app.research_portal.models import (
    Confidence,
    EarningsAnalysisResult,
    FinancialExtractionResult,
    FinancialLineItem,
    ForwardGuidance,
    ManagementTone,
    clean_string_list,
    parse_amount,
)


class TestParseAmount:
    """Tests for amount coercion."""

    def test_numbers_pass_through(self):
        assert parse_amount(150) == 150.0
        assert parse_amount(99.5) == 99.5

    def test_formatted_strings(self):
        assert parse_amount("$1,234.56") == 1234.56
        assert parse_amount(" 42.5 ") == 42.5
        assert parse_amount("150 million") == 150.0

    def test_missing_markers_become_none(self):
        assert parse_amount(None) is None
        assert parse_amount("") is None
        assert parse_amount("Not found") is None
        assert parse_amount("N/A") is None
        assert parse_amount("null") is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("-1,234", -1234.0),
            ("(1,234)", -1234.0),
            ("($1,234.5)", -1234.5),
            ("$-45.5", -45.5),
            ("-$45.5", -45.5),
            ("-12 million", -12.0),
            ("USD -3", -3.0),
            (-250, -250.0),
        ],
    )
    def test_negative_amounts_keep_their_sign(self, raw, expected):
        """Test that losses written with a minus or in parentheses stay negative."""
        assert parse_amount(raw) == expected

    def test_hyphenated_ranges_are_not_negative(self):
        result = parse_amount("2023-24 revenue 150")
        assert result is None or result > 0

    @pytest.mark.parametrize("raw", [10**400, -(10**400), 1e308 * 10])
    def test_overflowing_numbers_become_none(self, raw):
        assert parse_amount(raw) is None

    def test_non_finite_becomes_none(self):
        assert parse_amount(math.nan) is None
        assert parse_amount(math.inf) is None
        assert parse_amount(-math.inf) is None

    def test_unparseable_becomes_none(self):
        assert parse_amount("not a number") is None
        assert parse_amount(True) is None
        assert parse_amount({"value": 1}) is None


class TestFinancialLineItem:
    """Tests for FinancialLineItem model."""

    def test_camel_case_input_and_output(self):
        item = FinancialLineItem.model_validate(
            {
                "category": "Income Statement",
                "lineItem": "Revenue",
                "value": 150,
                "currency": "USD",
                "unit": "millions",
                "period": "2023",
                "confidence": "high",
            }
        )
        assert item.line_item == "Revenue"
        assert item.value == 150.0

        dumped = item.model_dump(by_alias=True)
        assert dumped["lineItem"] == "Revenue"
        assert "line_item" not in dumped

    def test_snake_case_input_accepted(self):
        item = FinancialLineItem(line_item="Net Income", value="20")
        assert item.line_item == "Net Income"
        assert item.value == 20.0

    def test_value_is_never_a_string_or_nan(self):
        assert FinancialLineItem(line_item="A", value="unclear").value is None
        assert FinancialLineItem(line_item="A", value=float("nan")).value is None

    def test_huge_integer_value_becomes_none(self):
        item = FinancialLineItem.model_validate({"lineItem": "Revenue", "value": 10**400})
        assert item.value is None

    def test_accounting_negative_value(self):
        item = FinancialLineItem.model_validate({"lineItem": "Net Loss", "value": "(1,234)"})
        assert item.value == -1234.0

    def test_unknown_confidence_is_low(self):
        item = FinancialLineItem(line_item="Revenue", confidence="very sure")
        assert item.confidence == Confidence.LOW

    def test_confidence_is_case_insensitive(self):
        item = FinancialLineItem(line_item="Revenue", confidence="HIGH")
        assert item.confidence == Confidence.HIGH

    def test_missing_category_defaults(self):
        item = FinancialLineItem(line_item="Revenue", category=None, currency=None)
        assert item.category == "Uncategorized"
        assert item.currency == ""

    def test_numeric_period_becomes_string(self):
        item = FinancialLineItem(line_item="Revenue", period=2023)
        assert item.period == "2023"

    def test_line_item_required(self):
        with pytest.raises(ValidationError):
            FinancialLineItem.model_validate({"value": 10})
        with pytest.raises(ValidationError):
            FinancialLineItem(line_item="   ")


class TestResults:
    """Tests for the result models."""

    def test_financial_result_defaults(self):
        result = FinancialExtractionResult(document_summary="Summary")
        assert result.warnings == []
        assert result.line_items == []
        assert result.years_found == []

    def test_financial_result_serializes_camel_case(self):
        result = FinancialExtractionResult(document_summary="Summary", years_found=["2023"])
        dumped = result.model_dump(by_alias=True)
        assert dumped["documentSummary"] == "Summary"
        assert dumped["yearsFound"] == ["2023"]

    def test_earnings_result_defaults(self):
        result = EarningsAnalysisResult(analyzed_length=0)
        assert result.management_tone == ManagementTone.NEUTRAL
        assert result.confidence_level == Confidence.LOW
        assert result.forward_guidance.is_empty()

    def test_earnings_result_rejects_oversized_lists(self):
        with pytest.raises(ValidationError):
            EarningsAnalysisResult(analyzed_length=10, key_positives=["p"] * 6)
        with pytest.raises(ValidationError):
            EarningsAnalysisResult(analyzed_length=10, growth_initiatives=["g"] * 4)


class TestForwardGuidance:
    """Tests for ForwardGuidance model."""

    def test_unknown_keys_ignored(self):
        guidance = ForwardGuidance.model_validate({"revenue": "Up 5%", "ebitda": "Flat"})
        assert guidance.revenue == "Up 5%"
        assert not hasattr(guidance, "ebitda")

    def test_null_fields_count_as_empty(self):
        guidance = ForwardGuidance.model_validate(
            {"revenue": None, "margin": "", "other": [None]}
        )
        assert guidance.is_empty()

    def test_other_accepts_single_string(self):
        guidance = ForwardGuidance.model_validate({"other": "Share buyback"})
        assert guidance.other == ["Share buyback"]
        assert not guidance.is_empty()


def test_clean_string_list():
    assert clean_string_list(["a", None, " ", 3, " b "]) == ["a", "3", "b"]
    assert clean_string_list(None) == []
    assert clean_string_list("single") == ["single"]
    assert clean_string_list({"not": "a list"}) == []
