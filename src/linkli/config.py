"""Configuration resolution with a fixed precedence chain.

Settings for one ``linkli`` run come from four layers (high to low):

1. CLI flags (``--schema``, ``--base-url``, ``--header``)
2. Environment variables (``LINKLI_SCHEMA``, ``LINKLI_BASE_URL``,
   ``LINKLI_TOKEN``)
3. Project config (``./linkli.json``)
4. Defaults, and the schema's own ``rel: self`` link for the base URL

:func:`resolve_config` merges layers 1-3 into a
:class:`~linkli.models.ProjectConfig`;
:func:`build_client_config` turns that, plus the loaded schema document,
into the :class:`~linkli.models.ClientConfig` the client runs with.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from linkli.exceptions import ConfigError
from linkli.models import ClientConfig, ProjectConfig

_PROJECT_CONFIG_FILENAME = "linkli.json"

ENV_SCHEMA = "LINKLI_SCHEMA"
ENV_BASE_URL = "LINKLI_BASE_URL"
ENV_TOKEN = "LINKLI_TOKEN"


# --- Project-local config ---


def load_project_config(path: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load project-local configuration from ``./linkli.json``.

    Args:
        path: Explicit file to read instead of ``./linkli.json``.

    Returns:
        The parsed config, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = path or Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_schema: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_headers: Optional[Iterable[str]] = None,
) -> ProjectConfig:
    """Resolve settings with the full precedence chain.

    Args:
        cli_schema: ``--schema`` value.
        cli_base_url: ``--base-url`` value.
        cli_headers: ``--header`` values, each ``"Name: value"``.

    Returns:
        The merged settings.

    Raises:
        ConfigError: On an invalid project file or a malformed header.
    """
    resolved = load_project_config() or ProjectConfig()

    env_schema = os.environ.get(ENV_SCHEMA)
    if env_schema:
        resolved.schema_source = env_schema
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        resolved.base_url = env_base_url
    env_token = os.environ.get(ENV_TOKEN)
    if env_token:
        resolved.headers["Authorization"] = f"Bearer {env_token}"

    if cli_schema is not None:
        resolved.schema_source = cli_schema
    if cli_base_url is not None:
        resolved.base_url = cli_base_url
    for raw in cli_headers or ():
        name, value = parse_header(raw)
        resolved.headers[name] = value

    return resolved


def build_client_config(
    resolved: ProjectConfig,
    document: Optional[dict[str, Any]] = None,
) -> ClientConfig:
    """Produce the :class:`ClientConfig` for *resolved* settings.

    When no base URL was configured, the schema's top-level ``rel: self``
    link supplies it.

    Raises:
        ConfigError: If no base URL can be determined.
    """
    base_url = resolved.base_url or (schema_base_url(document) if document else None)
    if not base_url:
        raise ConfigError(
            f"No base URL configured. Pass --base-url or set {ENV_BASE_URL}."
        )

    config = ClientConfig(base_url=base_url)
    config.default_headers.update(resolved.headers)
    if resolved.timeout is not None:
        config.timeout = resolved.timeout
    if resolved.verify_ssl is not None:
        config.verify_ssl = resolved.verify_ssl
    return config


def schema_base_url(document: dict[str, Any]) -> Optional[str]:
    """Return the ``href`` of the document's top-level ``rel: self`` link."""
    for link in document.get("links") or []:
        if isinstance(link, dict) and link.get("rel") == "self" and link.get("href"):
            return str(link["href"])
    return None


def parse_header(raw: str) -> tuple[str, str]:
    """Split ``"Name: value"`` into its parts.

    Raises:
        ConfigError: If there is no colon or the name is empty.
    """
    name, sep, value = raw.partition(":")
    name = name.strip()
    if not sep or not name:
        raise ConfigError(f"Invalid header '{raw}'. Expected 'Name: value'.")
    return name, value.strip()
