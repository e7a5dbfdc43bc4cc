"""
Pydantic models for the research portal pipeline.

Defines strict types for completion requests/responses, financial line
items, earnings call analyses and the API envelopes around them.

Result models serialize with camelCase aliases (``lineItem``,
``yearsFound``, ``managementTone``) and accept either spelling on input.
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from price_parser import Price
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Strings the model uses to say "there is no number here"
_MISSING_MARKERS = {"", "null", "none", "n/a", "na", "not found", "not available", "-", "--"}

# Leading minus sign, possibly next to a currency symbol or code ("-12", "$-45.5", "-$45.5")
_LEADING_MINUS = re.compile(r"^[^\d\-\u2212]*[\-\u2212]\D{0,4}\d")


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Confidence(str, Enum):
    """Confidence tag attached to extracted data."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ManagementTone(str, Enum):
    """Overall tone of management commentary."""

    OPTIMISTIC = "optimistic"
    CAUTIOUS = "cautious"
    NEUTRAL = "neutral"
    PESSIMISTIC = "pessimistic"


class ToolType(str, Enum):
    """Which analysis to run on an uploaded document."""

    FINANCIAL = "financial"
    EARNINGS = "earnings"


def parse_amount(value: Any) -> float | None:
    """
    Coerce a model-provided amount to a finite float.

    Handles plain numbers and formatted strings ("$1,234.5", "150 million",
    "€1.234,56") via price-parser. price-parser ignores the sign, so a
    leading minus ("-1,234", "$-45.5") or accounting parentheses
    ("(1,234)") are detected here and applied to its result.

    Anything unparseable, NaN, infinite or too large for a float becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            value = value.strip()
            if value.lower() in _MISSING_MARKERS:
                return None
            negative = False
            if value.startswith("(") and value.endswith(")"):
                negative = True
                value = value[1:-1].strip()
            if _LEADING_MINUS.match(value):
                negative = True
            number = Price.fromstring(value).amount_float
            if number is None:
                return None
            if negative:
                number = -abs(number)
        else:
            return None
    except OverflowError:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def clean_string_list(value: Any) -> list[str]:
    """Normalize a model-provided list: stringify entries, drop nulls and blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    cleaned = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


# =============================================================================
# Completion Models
# =============================================================================


class CompletionRequest(BaseModel):
    """A single prompt sent to the completion endpoint."""

    prompt: str = Field(..., min_length=1, description="Full user prompt")
    json_schema: dict[str, Any] | None = Field(
        default=None,
        description="Advisory JSON schema; used to word the prompt, never enforced",
    )
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)


class TokenUsage(BaseModel):
    """Token counters reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0


class CompletionResponse(BaseModel):
    """Raw completion text plus usage counters."""

    content: str = Field(default="", description="Raw text returned by the model")
    usage: TokenUsage = Field(default_factory=TokenUsage)


# =============================================================================
# Financial Statement Models
# =============================================================================


class FinancialLineItem(CamelModel):
    """
    One financial line item extracted from a document.

    Attributes:
        category: Free-text classification, e.g. "Income Statement".
        line_item: Name of the line item, e.g. "Revenue".
        value: Finite number, or None when mentioned but unparseable/absent.
        currency: Currency code, e.g. "USD".
        unit: Unit of the value, e.g. "millions".
        period: Period or fiscal year the value belongs to.
        confidence: How sure the model is about this item.
        notes: Optional free-text note from the model.
    """

    category: str = Field(default="Uncategorized", description="Statement category")
    line_item: str = Field(..., min_length=1, description="Line item name")
    value: float | None = Field(default=None, description="Numeric value or null")
    currency: str = Field(default="", description="Currency code")
    unit: str = Field(default="", description="Unit, e.g. millions")
    period: str | None = Field(default=None, description="Period or year")
    confidence: Confidence = Field(default=Confidence.LOW)
    notes: str | None = Field(default=None)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float | None:
        """Never keep strings, NaN or infinities as values."""
        return parse_amount(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v: Any) -> str:
        """Unknown confidence tags are treated as low."""
        if isinstance(v, Confidence):
            return v.value
        if isinstance(v, str) and v.strip().lower() in {c.value for c in Confidence}:
            return v.strip().lower()
        return Confidence.LOW.value

    @field_validator("line_item", mode="before")
    @classmethod
    def strip_line_item(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> str:
        text = str(v).strip() if v is not None else ""
        return text or "Uncategorized"

    @field_validator("currency", "unit", mode="before")
    @classmethod
    def blank_text(cls, v: Any) -> str:
        return str(v).strip() if v is not None else ""

    @field_validator("period", "notes", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class FinancialExtractionResult(CamelModel):
    """Complete result of a financial statement extraction."""

    document_summary: str = Field(..., description="Human-readable summary")
    years_found: list[str] = Field(
        default_factory=list,
        description="Distinct years in order of first appearance",
    )
    line_items: list[FinancialLineItem] = Field(default_factory=list)
    extraction_notes: str = Field(default="")
    warnings: list[str] = Field(
        default_factory=list,
        description="One entry per detected anomaly",
    )


# =============================================================================
# Earnings Call Models
# =============================================================================


class ForwardGuidance(CamelModel):
    """Forward-looking guidance given by management. Unknown keys are ignored."""

    revenue: str | None = None
    margin: str | None = None
    capex: str | None = None
    other: list[str] | None = None

    @field_validator("revenue", "margin", "capex", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("other", mode="before")
    @classmethod
    def clean_other(cls, v: Any) -> list[str] | None:
        return clean_string_list(v) or None

    def is_empty(self) -> bool:
        """True when no guidance field carries a value."""
        return not any((self.revenue, self.margin, self.capex, self.other))


class EarningsAnalysisResult(CamelModel):
    """Complete result of an earnings call analysis."""

    management_tone: ManagementTone = Field(default=ManagementTone.NEUTRAL)
    confidence_level: Confidence = Field(default=Confidence.LOW)
    key_positives: list[str] = Field(default_factory=list, max_length=5)
    key_concerns: list[str] = Field(default_factory=list, max_length=5)
    forward_guidance: ForwardGuidance = Field(default_factory=ForwardGuidance)
    capacity_utilization: str | None = None
    growth_initiatives: list[str] = Field(default_factory=list, max_length=3)
    analyzed_length: int = Field(..., ge=0, description="Length of the analyzed text")
    data_quality: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# API Models
# =============================================================================


class ProcessResponse(CamelModel):
    """Response model for the process endpoint."""

    success: bool = True
    filename: str
    tool_type: ToolType
    result: FinancialExtractionResult | EarningsAnalysisResult


class DownloadFinancialRequest(CamelModel):
    """Request model for exporting line items to a spreadsheet."""

    data: FinancialExtractionResult


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str = Field(default="")
    version: str = Field(default="1.0.0")
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
