"""
AI service package for LLM-driven document analysis.

This package provides modular AI functionality split into:
- client: Completion client for the OpenAI chat completions API
- coercion: Recovery of JSON payloads from free-form model output
- financial: Financial statement line item extraction
- earnings: Earnings call tone and commentary analysis
- prompts: Prompt templates and the extraction prompt builder
"""

import logging

from .client import ClientConfig, CompletionClient
from .coercion import CoercionResult, Parsed, Unparseable, coerce_json
from .earnings import analyze_earnings_call
from .exceptions import AIServiceError, ConfigurationError, UpstreamError
from .financial import extract_financial_statements, find_years

logger = logging.getLogger(__name__)

__all__ = [
    "AIServiceError",
    "ClientConfig",
    "CoercionResult",
    "CompletionClient",
    "ConfigurationError",
    "Parsed",
    "Unparseable",
    "UpstreamError",
    "analyze_earnings_call",
    "coerce_json",
    "extract_financial_statements",
    "find_years",
    "get_completion_client",
]


# =============================================================================
# Singleton Factory
# =============================================================================

_completion_client: CompletionClient | None = None


def get_completion_client() -> CompletionClient:
    """Get or create the completion client singleton."""
    global _completion_client
    if _completion_client is None:
        config = ClientConfig.from_settings()
        if not config.api_key:
            logger.warning(
                "OPENAI_API_KEY is not set. Document processing requests will fail until it is configured."
            )
        _completion_client = CompletionClient(config)
    return _completion_client
