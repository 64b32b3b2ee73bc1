"""Read a hyper-schema document into a plain dictionary.

A source is ``-`` (stdin), an ``http(s)://`` URL, or a local path.  Each
source reader returns the raw text plus a format guess taken from the file
suffix or the response ``Content-Type``; :func:`_decode` then turns the text
into a dict.  Every failure surfaces as :class:`~linkli.exceptions.SchemaError`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import yaml

from linkli.exceptions import SchemaError

_SUFFIX_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_schema(source: str) -> dict[str, Any]:
    """Load a schema document from *source*.

    Raises:
        SchemaError: If the source is unreadable or is not a JSON/YAML object.
    """
    reader: Callable[[str], tuple[str, str]]
    if source == "-":
        reader = _read_stdin
    elif source.startswith(("http://", "https://")):
        reader = _read_url
    else:
        reader = _read_file
    text, fmt = reader(source)
    return _decode(text, fmt)


def validate_schema_document(document: dict[str, Any]) -> dict[str, Any]:
    """Return the document's ``definitions`` mapping.

    Raises:
        SchemaError: If ``definitions`` is missing or is not an object.
    """
    definitions = document.get("definitions")
    if definitions is None:
        raise SchemaError(
            "Missing 'definitions' field. Is this a hyper-schema document?"
        )
    if not isinstance(definitions, dict):
        raise SchemaError(
            f"'definitions' must be an object (got {type(definitions).__name__})"
        )
    return definitions


# ---------------------------------------------------------------------------
# Source readers: (text, format) where format is "json", "yaml" or ""
# ---------------------------------------------------------------------------


def _read_stdin(_: str) -> tuple[str, str]:
    try:
        text = sys.stdin.read()
    except OSError as exc:
        raise SchemaError(f"Failed to read from stdin: {exc}") from exc
    if not text.strip():
        raise SchemaError("No input received from stdin")
    return text, ""


def _read_url(url: str) -> tuple[str, str]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaError(
            f"HTTP {exc.response.status_code} fetching schema from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SchemaError(f"Failed to fetch schema from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    fmt = "json" if "json" in content_type else "yaml" if "yaml" in content_type else ""
    return response.text, fmt


def _read_file(path: str) -> tuple[str, str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SchemaError(f"Schema file not found: {path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read schema file {path}: {exc}") from exc
    if not text.strip():
        raise SchemaError(f"Schema file is empty: {path}")
    return text, _SUFFIX_FORMATS.get(file_path.suffix.lower(), "")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode(text: str, fmt: str) -> dict[str, Any]:
    """Decode *text* as JSON, or as YAML when JSON fails or *fmt* says so.

    A document declared JSON must be valid JSON; otherwise YAML (a superset
    of JSON) is the fallback.
    """
    if fmt != "yaml":
        try:
            return _as_object(json.loads(text))
        except json.JSONDecodeError as exc:
            if fmt == "json":
                raise SchemaError(f"Invalid JSON: {exc}") from exc

    try:
        return _as_object(yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise SchemaError(f"Failed to parse schema as JSON or YAML: {exc}") from exc


def _as_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = "empty document" if value is None else type(value).__name__
        raise SchemaError(f"Schema must be a JSON/YAML object (got {kind})")
    return value
