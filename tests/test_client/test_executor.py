"""Tests for linkli.client.executor -- status classification and decoding."""

from __future__ import annotations

from typing import Any

import pytest

from linkli.client.executor import RequestExecutor, is_json_content_type
from linkli.exceptions import (
    AuthError,
    NotFoundError,
    ParseError,
    ServerError,
    TransportError,
)
from linkli.exit_codes import EXIT_AUTH_FAILURE, EXIT_NOT_FOUND, EXIT_SERVER_ERROR
from linkli.models import HTTPMethod, HttpRequest, HttpResponse
from linkli.output import OutputManager, set_output

REQUEST = HttpRequest(method=HTTPMethod.GET, path="/resource", headers={"Accept": "application/json"})


# ---------------------------------------------------------------------------
# Content types
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "content_type",
    [
        "application/json",
        "application/json; charset=utf-8",
        "APPLICATION/JSON",
        "application/schema+json",
        "application/vnd.heroku+json; version=3",
    ],
)
def test_json_content_types(content_type: str) -> None:
    assert is_json_content_type(content_type)


@pytest.mark.parametrize(
    "content_type",
    ["", None, "text/plain", "text/json", "application/jsonp", "application/xml"],
)
def test_non_json_content_types(content_type: str | None) -> None:
    assert not is_json_content_type(content_type)


# ---------------------------------------------------------------------------
# execute
# ---------------------------------------------------------------------------


class TestExecute:
    def test_sends_request_through_transport(self, transport: Any) -> None:
        transport.queue(200, json_body={"id": 1})
        response = RequestExecutor(transport).execute(REQUEST)
        assert response.status_code == 200
        sent = transport.requests[0]
        assert (sent.method, sent.path) == ("GET", "/resource")
        assert sent.headers == {"Accept": "application/json"}
        assert sent.body is None

    @pytest.mark.parametrize("status", [200, 201, 202, 204, 206])
    def test_any_2xx_is_success(self, transport: Any, status: int) -> None:
        transport.queue(status)
        assert RequestExecutor(transport).execute(REQUEST).status_code == status

    @pytest.mark.parametrize(
        "status,exc_type,exit_code",
        [
            (401, AuthError, EXIT_AUTH_FAILURE),
            (403, AuthError, EXIT_AUTH_FAILURE),
            (404, NotFoundError, EXIT_NOT_FOUND),
            (422, ServerError, EXIT_SERVER_ERROR),
            (500, ServerError, EXIT_SERVER_ERROR),
            (304, ServerError, EXIT_SERVER_ERROR),
        ],
    )
    def test_non_2xx_raises(
        self, transport: Any, status: int, exc_type: type, exit_code: int
    ) -> None:
        transport.queue(status)
        with pytest.raises(exc_type) as exc_info:
            RequestExecutor(transport).execute(REQUEST)
        assert type(exc_info.value) is exc_type
        assert exc_info.value.status_code == status
        assert exc_info.value.exit_code == exit_code

    def test_error_keeps_response(self, transport: Any) -> None:
        transport.queue(
            422,
            json_body={"id": "invalid_params", "message": "Name is too long"},
            headers={"Request-Id": "abc"},
        )
        with pytest.raises(ServerError) as exc_info:
            RequestExecutor(transport).execute(REQUEST)
        error = exc_info.value
        assert str(error) == "HTTP 422: Name is too long"
        assert error.data == {"id": "invalid_params", "message": "Name is too long"}
        assert error.headers["Request-Id"] == "abc"

    def test_error_with_text_body(self, transport: Any) -> None:
        transport.queue(503, content=b"Service Unavailable")
        with pytest.raises(ServerError, match="HTTP 503: Service Unavailable") as exc_info:
            RequestExecutor(transport).execute(REQUEST)
        assert exc_info.value.data is None

    def test_transport_error_propagates(self, transport: Any) -> None:
        transport.fail_with(TransportError("Connection failed"))
        with pytest.raises(TransportError, match="Connection failed"):
            RequestExecutor(transport).execute(REQUEST)

    def test_debug_trace(self, transport: Any, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(no_color=True, verbose=True))
        transport.queue(200, json_body=[])
        RequestExecutor(transport).execute(REQUEST.with_header("Range", "id ..; max=10"))
        err = capsys.readouterr().err
        assert "[debug] GET /resource" in err
        assert "[debug]   Range: id ..; max=10" in err
        assert "[debug] HTTP 200 (2 bytes)" in err


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


class TestDecode:
    def _decode(self, response: HttpResponse) -> Any:
        return RequestExecutor(transport=None).decode(response)  # type: ignore[arg-type]

    def test_json(self) -> None:
        response = HttpResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            content=b'{"a": [1, 2]}',
        )
        assert self._decode(response) == {"a": [1, 2]}

    def test_vendor_json(self) -> None:
        response = HttpResponse(
            status_code=200,
            headers={"content-type": "application/vnd.heroku+json; version=3"},
            content=b"[1]",
        )
        assert self._decode(response) == [1]

    def test_empty_body(self) -> None:
        response = HttpResponse(
            status_code=204, headers={"Content-Type": "application/json"}
        )
        assert self._decode(response) is None

    def test_non_json_is_raw(self) -> None:
        response = HttpResponse(
            status_code=200,
            headers={"Content-Type": "text/plain"},
            content=b"hello",
        )
        assert self._decode(response) == b"hello"

    def test_missing_content_type_is_raw(self) -> None:
        response = HttpResponse(status_code=200, content=b"{}")
        assert self._decode(response) == b"{}"

    def test_malformed_json(self) -> None:
        response = HttpResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            content=b"{oops",
        )
        with pytest.raises(ParseError) as exc_info:
            self._decode(response)
        assert exc_info.value.content_type == "application/json"
        assert exc_info.value.body == b"{oops"
