"""
Earnings call analysis.

Runs a fixed, ordered list of stages over the document text:

    precheck -> tone -> extraction -> postcheck -> assemble

Every stage is independently fallible. Failures are recorded as warnings
(operational failures) or data-quality notes (unusable model output) and
the pipeline always reaches assembly.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ...models import (
    Confidence,
    EarningsAnalysisResult,
    ForwardGuidance,
    ManagementTone,
    clean_string_list,
)
from .client import CompletionClient
from .coercion import Parsed, coerce_json
from .exceptions import UpstreamError
from .prompts import EARNINGS_EXTRACTION_PROMPT, TONE_PROMPT

logger = logging.getLogger(__name__)

MIN_DOCUMENT_LENGTH = 500
MAX_KEY_POSITIVES = 5
MAX_KEY_CONCERNS = 5
MAX_GROWTH_INITIATIVES = 3


@dataclass
class AnalysisState:
    """Mutable working state threaded through the stages of one analysis."""

    text: str
    tone: ManagementTone = ManagementTone.NEUTRAL
    confidence: Confidence = Confidence.LOW
    key_positives: list[str] = field(default_factory=list)
    key_concerns: list[str] = field(default_factory=list)
    forward_guidance: ForwardGuidance = field(default_factory=ForwardGuidance)
    capacity_utilization: str | None = None
    growth_initiatives: list[str] = field(default_factory=list)
    data_quality: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


Stage = Callable[[AnalysisState, CompletionClient], Awaitable[None]]


def _get(payload: dict[str, Any], camel: str, snake: str) -> Any:
    """Read a key the model may have written in either camelCase or snake_case."""
    return payload[camel] if camel in payload else payload.get(snake)


# =============================================================================
# Stages
# =============================================================================


async def run_prechecks(state: AnalysisState, client: CompletionClient) -> None:
    """Cheap, advisory checks on the document itself. No LLM involved."""
    if len(state.text) < MIN_DOCUMENT_LENGTH:
        state.warnings.append("Document is quite short - analysis may be incomplete")

    if not any(ch.isdigit() for ch in state.text):
        state.warnings.append(
            "No numerical data found - document may not be an earnings call or financial document"
        )


async def run_tone_stage(state: AnalysisState, client: CompletionClient) -> None:
    """Classify management tone and the confidence of that classification."""
    try:
        response = await client.extract(state.text, TONE_PROMPT)
    except UpstreamError as e:
        logger.error("Tone analysis call failed: %s", e)
        state.warnings.append(f"Tone analysis failed: {e}")
        return

    coerced = coerce_json(response.content)
    if not isinstance(coerced, Parsed) or not isinstance(coerced.value, dict):
        state.data_quality.append("Tone analysis returned unparseable format")
        return

    payload = coerced.value
    tone = payload.get("tone")
    if isinstance(tone, str) and tone.strip().lower() in {t.value for t in ManagementTone}:
        state.tone = ManagementTone(tone.strip().lower())
    else:
        logger.warning("Unrecognized tone %r, keeping %s", tone, state.tone.value)

    confidence = payload.get("confidence")
    if isinstance(confidence, str) and confidence.strip().lower() in {c.value for c in Confidence}:
        state.confidence = Confidence(confidence.strip().lower())


async def run_extraction_stage(state: AnalysisState, client: CompletionClient) -> None:
    """Extract positives, concerns, guidance, capacity and growth initiatives in one call."""
    try:
        response = await client.extract(state.text, EARNINGS_EXTRACTION_PROMPT)
    except UpstreamError as e:
        logger.error("Earnings extraction call failed: %s", e)
        state.warnings.append(f"Data extraction failed: {e}")
        return

    coerced = coerce_json(response.content)
    if not isinstance(coerced, Parsed) or not isinstance(coerced.value, dict):
        state.data_quality.append(
            "Extraction returned unparseable format - using partial results"
        )
        return

    payload = coerced.value
    state.key_positives = clean_string_list(_get(payload, "keyPositives", "key_positives"))
    state.key_concerns = clean_string_list(_get(payload, "keyConcerns", "key_concerns"))
    state.growth_initiatives = clean_string_list(
        _get(payload, "growthInitiatives", "growth_initiatives")
    )

    guidance = _get(payload, "forwardGuidance", "forward_guidance")
    if isinstance(guidance, dict):
        try:
            state.forward_guidance = ForwardGuidance.model_validate(guidance)
        except ValidationError as e:
            logger.warning("Discarding malformed forward guidance: %s", e)

    capacity = _get(payload, "capacityUtilization", "capacity_utilization")
    if capacity is not None and str(capacity).strip():
        state.capacity_utilization = str(capacity).strip()


async def run_postchecks(state: AnalysisState, client: CompletionClient) -> None:
    """Record data-quality notes for sections the model returned nothing for."""
    if not state.key_positives:
        state.data_quality.append(
            "No key positives extracted - document may lack forward-looking statements"
        )
    if not state.key_concerns:
        state.data_quality.append(
            "No concerns/challenges identified - document may be incomplete transcript"
        )
    if state.forward_guidance.is_empty():
        state.data_quality.append(
            "Limited forward guidance extracted - check original document for guidance section"
        )


STAGES: tuple[tuple[str, Stage], ...] = (
    ("precheck", run_prechecks),
    ("tone", run_tone_stage),
    ("extraction", run_extraction_stage),
    ("postcheck", run_postchecks),
)


# =============================================================================
# Pipeline
# =============================================================================


def _assemble(state: AnalysisState) -> EarningsAnalysisResult:
    """Build the final result, truncating bounded lists in model order."""
    return EarningsAnalysisResult(
        management_tone=state.tone,
        confidence_level=state.confidence,
        key_positives=state.key_positives[:MAX_KEY_POSITIVES],
        key_concerns=state.key_concerns[:MAX_KEY_CONCERNS],
        forward_guidance=state.forward_guidance,
        capacity_utilization=state.capacity_utilization,
        growth_initiatives=state.growth_initiatives[:MAX_GROWTH_INITIATIVES],
        analyzed_length=len(state.text),
        data_quality=state.data_quality,
        warnings=state.warnings,
    )


async def analyze_earnings_call(
    document_text: str,
    client: CompletionClient,
) -> EarningsAnalysisResult:
    """
    Analyze an earnings call transcript or management commentary.

    Args:
        document_text: Full text of the document.
        client: Completion client to use.

    Returns:
        EarningsAnalysisResult; failures degrade to defaults plus a
        recorded warning or data-quality note.
    """
    state = AnalysisState(text=document_text)

    for name, stage in STAGES:
        logger.debug("Running earnings analysis stage: %s", name)
        await stage(state, client)

    result = _assemble(state)
    logger.info(
        "Earnings analysis complete: tone=%s (%s), %d positives, %d concerns, %d warnings",
        result.management_tone.value,
        result.confidence_level.value,
        len(result.key_positives),
        len(result.key_concerns),
        len(result.warnings),
    )
    return result
