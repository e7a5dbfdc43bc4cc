"""
Financial statement extraction.

One completion call turns document text into typed financial line items,
followed by data-quality checks that each append exactly one warning.
"""

import logging
import re
from typing import Any

from pydantic import ValidationError

from ...models import Confidence, FinancialExtractionResult, FinancialLineItem
from .client import CompletionClient
from .coercion import Parsed, coerce_json
from .exceptions import UpstreamError
from .prompts import FINANCIAL_EXTRACTION_PROMPT, LINE_ITEMS_SCHEMA

logger = logging.getLogger(__name__)

# Four-digit tokens starting with "20"
YEAR_PATTERN = re.compile(r"(?<!\d)20\d{2}(?!\d)")

# Keys under which a model sometimes nests the line item array
_ARRAY_KEYS = ("lineItems", "line_items", "items")


def find_years(text: str) -> list[str]:
    """Return the distinct years mentioned in ``text``, in order of first appearance."""
    return list(dict.fromkeys(YEAR_PATTERN.findall(text)))


def _unwrap_line_items(payload: Any) -> list[Any] | None:
    """
    Get the line item array out of a coerced payload.

    Accepts a bare array, an object nesting the array under a known key,
    or a response envelope whose ``content`` field holds the JSON text.
    Returns None when no array can be found.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return None

    for key in _ARRAY_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    content = payload.get("content")
    if isinstance(content, str):
        inner = coerce_json(content)
        if isinstance(inner, Parsed):
            return _unwrap_line_items(inner.value)
    return None


def _build_line_items(raw_items: list[Any]) -> tuple[list[FinancialLineItem], int]:
    """Validate raw entries into line items. Returns (items, skipped_count)."""
    items: list[FinancialLineItem] = []
    skipped = 0
    for entry in raw_items:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        try:
            items.append(FinancialLineItem.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping malformed line item %s: %s", entry, e.errors()[:1])
            skipped += 1
        except (ArithmeticError, TypeError, ValueError) as e:
            logger.warning("Skipping unusable line item %s: %s", entry, e)
            skipped += 1
    return items, skipped


def _failed_result(message: str) -> FinancialExtractionResult:
    return FinancialExtractionResult(
        document_summary="Financial extraction partially failed",
        years_found=[],
        line_items=[],
        extraction_notes="Extraction could not complete. Check warnings for details.",
        warnings=[f"LLM extraction failed: {message}"],
    )


async def extract_financial_statements(
    document_text: str,
    client: CompletionClient,
) -> FinancialExtractionResult:
    """
    Extract financial line items from document text.

    Upstream failures never propagate: they produce a degraded result with
    a warning. A ConfigurationError (no API key) is not caught.

    Args:
        document_text: Full text of the document.
        client: Completion client to use.

    Returns:
        FinancialExtractionResult with line items, years found and warnings.
    """
    warnings: list[str] = []
    line_items: list[FinancialLineItem] = []

    try:
        response = await client.extract(
            document_text,
            FINANCIAL_EXTRACTION_PROMPT,
            LINE_ITEMS_SCHEMA,
        )
    except UpstreamError as e:
        logger.error("Financial extraction call failed: %s", e)
        return _failed_result(str(e))

    coerced = coerce_json(response.content)
    raw_items = _unwrap_line_items(coerced.value) if isinstance(coerced, Parsed) else None

    if raw_items is None:
        logger.warning("No line item array in model output")
        warnings.append("Could not parse extracted financial items as JSON")
    else:
        line_items, skipped = _build_line_items(raw_items)
        if skipped:
            warnings.append(
                f"{skipped} extracted entries were malformed and skipped"
            )

    years_found = find_years(document_text)

    # Data quality checks
    if not line_items:
        warnings.append(
            "No financial line items could be extracted. "
            "Document may not be a financial statement."
        )

    low_confidence = sum(1 for item in line_items if item.confidence == Confidence.LOW)
    if low_confidence:
        warnings.append(
            f"{low_confidence} items extracted with low confidence - please verify manually"
        )

    missing_values = sum(1 for item in line_items if item.value is None)
    if missing_values:
        warnings.append(
            f'{missing_values} items have missing values - marked as "Not found" in the spreadsheet'
        )

    logger.info(
        "Financial extraction complete: %d line items, years=%s, %d warnings",
        len(line_items),
        years_found,
        len(warnings),
    )

    return FinancialExtractionResult(
        document_summary=(
            "Extracted financial data from document. "
            f"Found {len(line_items)} line items across years: "
            f"{', '.join(years_found) or 'Not specified'}"
        ),
        years_found=years_found,
        line_items=line_items,
        extraction_notes=(
            "Successfully extracted line items. Please review low-confidence items and missing values."
            if line_items
            else "Extraction encountered issues. Please review warnings."
        ),
        warnings=warnings,
    )
