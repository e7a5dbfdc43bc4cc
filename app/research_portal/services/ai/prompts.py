"""
Prompt templates for financial extraction and earnings call analysis.
"""

import json
from typing import Any

# =============================================================================
# System Prompt
# =============================================================================

SYSTEM_PROMPT = (
    "You are a financial analyst and research assistant. "
    "Respond with structured, accurate data extraction."
)

# Appended to every extraction prompt
EXTRACTION_RULES = """Important:
- Only extract information explicitly mentioned in the text
- If information is not present, mark it as null or "Not found"
- For financial figures, ensure you include currency and units
- Be precise with numbers and dates"""


# =============================================================================
# Financial Statements
# =============================================================================

FINANCIAL_EXTRACTION_PROMPT = """You are a financial statement analyst. Extract income statement line items from this financial document.

For each line item found:
1. Name the category (e.g., "Income Statement", "Balance Sheet", "Cash Flow")
2. Extract the line item (e.g., "Revenue", "Cost of Goods Sold")
3. Extract the numeric value (remove commas and symbols)
4. Note the currency (USD, EUR, etc.)
5. Note the unit (millions, billions, units)
6. Note the period/year if multiple years

Return a JSON array of objects with this structure:
[
  {
    "category": "Income Statement",
    "lineItem": "Revenue",
    "value": 150000,
    "currency": "USD",
    "unit": "millions",
    "period": "2023",
    "confidence": "high",
    "notes": "From page 12"
  }
]

If a figure is mentioned but unclear, set value to null and mark confidence as "low".
Do not estimate or invent figures.
Include ALL income statement items you can identify."""

LINE_ITEMS_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "category": {"type": "string"},
            "lineItem": {"type": "string"},
            "value": {"type": ["number", "null"]},
            "currency": {"type": "string"},
            "unit": {"type": "string"},
            "period": {"type": "string"},
            "confidence": {"type": "string", "enum": ["high", "medium", "low"]},
            "notes": {"type": "string"},
        },
    },
}


# =============================================================================
# Earnings Calls
# =============================================================================

TONE_PROMPT = """You are analyzing an earnings call transcript or management commentary.

Based on the provided text, assess:
1. Management tone: Is management optimistic, cautious, neutral, or pessimistic about the business?
2. Confidence level: How confident do you feel in this assessment (high, medium, low)?

Consider language like:
- Optimistic: "strong growth", "exceeded expectations", "confident", "record"
- Cautious: "challenges", "headwinds", "uncertainty", "monitoring"
- Neutral: "in line with", "stable", "as expected", "unchanged"
- Pessimistic: "decline", "deteriorating", "difficult", "declining margins"

Return only a JSON object like:
{
  "tone": "optimistic",
  "confidence": "high",
  "reasoning": "Brief explanation based on specific phrases"
}"""

EARNINGS_EXTRACTION_PROMPT = """You are analyzing management commentary. Extract:

1. KEY POSITIVES (3-5): What positive developments, achievements, or favorable outlook did management highlight?
2. KEY CONCERNS (3-5): What challenges, risks, or headwinds did management mention?
3. FORWARD GUIDANCE: What specific guidance did management provide about:
   - Revenue outlook
   - Margin expectations
   - Capital expenditure plans
   - Other financial metrics
4. CAPACITY UTILIZATION: Any mentions of production capacity, staffing levels, or operational efficiency?
5. GROWTH INITIATIVES (2-3): New products, markets, or strategic initiatives mentioned?

Return a JSON object with this structure:
{
  "keyPositives": ["Item 1", "Item 2", "Item 3"],
  "keyConcerns": ["Concern 1", "Concern 2", "Concern 3"],
  "forwardGuidance": {
    "revenue": "Expected 5-10% growth in 2024",
    "margin": "Expecting margin expansion of 200 bps",
    "capex": "Capex will be 3-4% of revenue",
    "other": ["Debt reduction focus", "Share buyback program"]
  },
  "capacityUtilization": "Operating at 85% capacity, planning expansion",
  "growthInitiatives": ["Initiative 1", "Initiative 2"]
}

CRITICAL: Only extract information explicitly mentioned in the text. Do NOT infer or hallucinate information.
If something isn't mentioned, omit it or set to null."""


# =============================================================================
# Prompt Builder
# =============================================================================


def build_extraction_prompt(
    text: str,
    instructions: str,
    json_schema: dict[str, Any] | None = None,
    max_chars: int = 3000,
) -> str:
    """
    Build the user prompt for an extraction call.

    Only the first ``max_chars`` characters of ``text`` are included; later
    sections of long documents are never seen by the model.

    Args:
        text: Full document text.
        instructions: Task-specific instructions.
        json_schema: Optional advisory schema, rendered into the prompt.
        max_chars: Length of the document prefix to include.

    Returns:
        The prompt string.
    """
    if json_schema is not None:
        format_hint = (
            "Please respond with valid JSON matching this schema: "
            f"{json.dumps(json_schema)}"
        )
    else:
        format_hint = "Please provide a structured response."

    return f"""{instructions}

TEXT TO ANALYZE:
{text[:max_chars]}

{format_hint}

{EXTRACTION_RULES}"""
