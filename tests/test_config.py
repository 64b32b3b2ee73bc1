"""Tests for linkli.config -- project config, precedence, client settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from linkli.config import (
    ENV_BASE_URL,
    ENV_SCHEMA,
    ENV_TOKEN,
    build_client_config,
    load_project_config,
    parse_header,
    resolve_config,
    schema_base_url,
)
from linkli.exceptions import ConfigError
from linkli.models import ProjectConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*."""
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no linkli environment variables."""
    monkeypatch.chdir(tmp_path)
    for name in (ENV_SCHEMA, ENV_BASE_URL, ENV_TOKEN):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestLoadProjectConfig:
    def test_missing_file(self, project_dir: Path) -> None:
        assert load_project_config() is None

    def test_reads_linkli_json(self, project_dir: Path) -> None:
        _write_json(
            project_dir / "linkli.json",
            {
                "schema": "schema.json",
                "base_url": "https://api.example.com",
                "headers": {"X-Team": "core"},
                "timeout": 5,
                "unknown": "ignored",
            },
        )
        config = load_project_config()
        assert config is not None
        assert config.schema_source == "schema.json"
        assert config.base_url == "https://api.example.com"
        assert config.headers == {"X-Team": "core"}
        assert config.timeout == 5.0

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "other.json"
        _write_json(path, {"base_url": "https://other.example.com"})
        config = load_project_config(path)
        assert config is not None
        assert config.base_url == "https://other.example.com"

    def test_invalid_json(self, project_dir: Path) -> None:
        (project_dir / "linkli.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_invalid_field(self, project_dir: Path) -> None:
        _write_json(project_dir / "linkli.json", {"timeout": "soon"})
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, project_dir: Path) -> None:
        resolved = resolve_config()
        assert resolved.schema_source is None
        assert resolved.base_url is None
        assert resolved.headers == {}

    def test_project_file(self, project_dir: Path) -> None:
        _write_json(project_dir / "linkli.json", {"schema": "a.json", "base_url": "https://a"})
        resolved = resolve_config()
        assert resolved.schema_source == "a.json"
        assert resolved.base_url == "https://a"

    def test_env_overrides_project_file(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(project_dir / "linkli.json", {"schema": "a.json", "base_url": "https://a"})
        monkeypatch.setenv(ENV_SCHEMA, "b.json")
        monkeypatch.setenv(ENV_BASE_URL, "https://b")
        resolved = resolve_config()
        assert resolved.schema_source == "b.json"
        assert resolved.base_url == "https://b"

    def test_cli_overrides_env(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_SCHEMA, "b.json")
        monkeypatch.setenv(ENV_BASE_URL, "https://b")
        resolved = resolve_config("c.json", "https://c")
        assert resolved.schema_source == "c.json"
        assert resolved.base_url == "https://c"

    def test_token_becomes_bearer_header(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_TOKEN, "secret")
        assert resolve_config().headers == {"Authorization": "Bearer secret"}

    def test_cli_header_overrides_token(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_TOKEN, "secret")
        resolved = resolve_config(cli_headers=["Authorization: Basic abc", "X-A: 1"])
        assert resolved.headers == {"Authorization": "Basic abc", "X-A": "1"}

    def test_malformed_cli_header(self, project_dir: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid header"):
            resolve_config(cli_headers=["no-colon"])


# ---------------------------------------------------------------------------
# Client settings
# ---------------------------------------------------------------------------


class TestBuildClientConfig:
    def test_explicit_base_url(self) -> None:
        config = build_client_config(
            ProjectConfig(base_url="https://api.example.com", headers={"X-A": "1"})
        )
        assert config.base_url == "https://api.example.com"
        assert config.default_headers == {"Accept": "application/json", "X-A": "1"}
        assert config.timeout == 30.0
        assert config.verify_ssl is True

    def test_overrides_timeout_and_ssl(self) -> None:
        config = build_client_config(
            ProjectConfig(base_url="https://a", timeout=2.5, verify_ssl=False)
        )
        assert config.timeout == 2.5
        assert config.verify_ssl is False

    def test_base_url_from_schema(self, sample_document: dict[str, Any]) -> None:
        config = build_client_config(ProjectConfig(), sample_document)
        assert config.base_url == "https://example.com"

    def test_configured_base_url_wins_over_schema(
        self, sample_document: dict[str, Any]
    ) -> None:
        config = build_client_config(ProjectConfig(base_url="https://x"), sample_document)
        assert config.base_url == "https://x"

    def test_no_base_url(self) -> None:
        with pytest.raises(ConfigError, match="No base URL configured"):
            build_client_config(ProjectConfig(), {"definitions": {}})


class TestHelpers:
    def test_schema_base_url_ignores_other_links(self) -> None:
        document = {"links": [{"rel": "root", "href": "https://nope"}]}
        assert schema_base_url(document) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Accept: text/plain", ("Accept", "text/plain")),
            ("X-Empty:", ("X-Empty", "")),
            ("Range: id 0..; max=10", ("Range", "id 0..; max=10")),
        ],
    )
    def test_parse_header(self, raw: str, expected: tuple[str, str]) -> None:
        assert parse_header(raw) == expected

    def test_parse_header_without_name(self) -> None:
        with pytest.raises(ConfigError):
            parse_header(": value")
