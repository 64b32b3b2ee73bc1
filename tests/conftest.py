"""Shared test fixtures for linkli.

Provides the sample schema document, the extracted schema, a recording
:class:`FakeTransport` injected in place of the network, a client wired to
it, and automatic reset of the global output manager.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import pytest

from linkli.client import Client
from linkli.models import ApiSchema, ClientConfig, HttpResponse
from linkli.output import reset_output
from linkli.parser import extract_schema

FIXTURES_DIR = Path(__file__).parent / "fixtures"

UUID = "1ab1c589-df46-40aa-b786-60e83b1efb10"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager's Rich console binds to the stderr of the moment; CliRunner
    swaps those streams, so each test starts from a fresh manager.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


@dataclass
class SentRequest:
    """One request recorded by :class:`FakeTransport`."""

    method: str
    path: str
    headers: dict[str, str]
    body: Optional[bytes]

    def json(self) -> Any:
        assert self.body is not None
        return json.loads(self.body)


@dataclass
class FakeTransport:
    """Transport that records requests and replays queued responses in order."""

    responses: list[Any] = field(default_factory=list)
    requests: list[SentRequest] = field(default_factory=list)
    closed: bool = False

    def queue(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: bytes = b"",
        headers: Optional[Mapping[str, str]] = None,
    ) -> FakeTransport:
        """Queue a response; *json_body* sets a JSON body and content type."""
        headers = dict(headers or {})
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
            headers.setdefault("Content-Type", "application/json")
        self.responses.append(
            HttpResponse(status_code=status_code, headers=headers, content=content)
        )
        return self

    def fail_with(self, exc: Exception) -> FakeTransport:
        """Queue an exception to raise instead of a response."""
        self.responses.append(exc)
        return self

    def send(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> HttpResponse:
        self.requests.append(SentRequest(method, path, dict(headers), body))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {path}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Raw sample schema document."""
    with open(FIXTURES_DIR / "sample_schema.json") as f:
        return json.load(f)


@pytest.fixture
def sample_schema(sample_document: dict[str, Any]) -> ApiSchema:
    """Extracted sample schema."""
    return extract_schema(sample_document)


@pytest.fixture
def sample_schema_path(tmp_path: Path) -> Path:
    """Copy of the sample schema on disk."""
    path = tmp_path / "schema.json"
    path.write_text((FIXTURES_DIR / "sample_schema.json").read_text())
    return path


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(sample_schema: ApiSchema, transport: FakeTransport) -> Client:
    """Client for the sample schema wired to the fake transport."""
    return Client(sample_schema, transport, ClientConfig(base_url="https://example.com"))


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
