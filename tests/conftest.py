"""Pytest configuration and fixtures."""

from types import SimpleNamespace
from typing import Callable, Generator

import fitz
import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from app.research_portal.main import app
from app.research_portal.services.ai import ClientConfig, CompletionClient, get_completion_client

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


class ScriptedCompletions:
    """Stand-in for ``AsyncOpenAI().chat.completions`` returning scripted outputs in order."""

    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if not self.outputs:
            raise AssertionError("Unexpected completion call")
        output = self.outputs.pop(0)
        if isinstance(output, BaseException):
            raise output
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=output))],
            usage=SimpleNamespace(prompt_tokens=120, completion_tokens=40),
        )


class ScriptedOpenAI:
    """Minimal AsyncOpenAI-compatible client."""

    def __init__(self, outputs):
        self.chat = SimpleNamespace(completions=ScriptedCompletions(outputs))

    @property
    def requests(self) -> list[dict]:
        return self.chat.completions.requests


@pytest.fixture
def make_client() -> Callable[..., tuple[CompletionClient, ScriptedOpenAI]]:
    """
    Build a CompletionClient backed by scripted model outputs.

    Each positional argument is either the raw text of one completion or
    an exception to raise for that call.
    """

    def _make(*outputs, **config) -> tuple[CompletionClient, ScriptedOpenAI]:
        sdk = ScriptedOpenAI(outputs)
        client = CompletionClient(ClientConfig(api_key="test-key", **config), client=sdk)
        return client, sdk

    return _make


@pytest.fixture
def api_error() -> Callable[[int, str], openai.APIStatusError]:
    """Build a real OpenAI SDK status error (e.g. 429 rate limit)."""

    def _make(status_code: int, message: str) -> openai.APIStatusError:
        request = httpx.Request("POST", OPENAI_URL)
        response = httpx.Response(
            status_code, request=request, json={"error": {"message": message}}
        )
        return openai.APIStatusError(message, response=response, body={"message": message})

    return _make


def make_pdf(*pages: str) -> bytes:
    """Create a PDF with one page per argument, each holding the given text."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    """Factory for PDFs built from per-page text."""
    return make_pdf


@pytest.fixture
def financial_pdf_bytes() -> bytes:
    """A 2-page financial statement PDF."""
    return make_pdf(
        "Acme Corp Annual Report\nRevenue of $150 million in 2023",
        "Net income of $20 million in 2023\nCompared to 2022",
    )


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override_completion_client():
    """Install a completion client for the app's process endpoint."""

    def _install(completion_client: CompletionClient) -> None:
        app.dependency_overrides[get_completion_client] = lambda: completion_client

    yield _install
    app.dependency_overrides.clear()
