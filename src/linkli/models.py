"""Canonical Pydantic models shared across all linkli modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Schema models** -- produced once by :func:`~linkli.parser.extract_schema`
and shared read-only by the client and the command generator:
    :class:`HTTPMethod`, :class:`LinkParameter`, :class:`UrlSegment`,
    :class:`LinkDefinition`, :class:`PropertyDefinition`,
    :class:`ResourceSchema`, and :class:`ApiSchema`.

**Exchange models** -- transient values that live for a single invocation:
    :class:`HttpRequest`, :class:`HttpResponse`, and :class:`PageCursor`.

**Configuration models**:
    :class:`ClientConfig` and :class:`ProjectConfig`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Schema Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a schema link may declare."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})
"""Methods whose links may carry a trailing request-body argument."""


class LinkParameter(BaseModel):
    """A path parameter referenced from a link's ``href`` template.

    ``name`` is what usage text shows between angle brackets. For identity
    parameters declared with ``anyOf``/``oneOf`` it joins the option names
    with ``|`` (e.g. ``uuid_field|name_field``) and ``choices`` lists them.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    pointer: Optional[str] = Field(
        default=None, description="JSON pointer the template referenced"
    )
    description: Optional[str] = None
    choices: list[str] = Field(default_factory=list)


class UrlSegment(BaseModel):
    """One piece of a parsed URL template: a literal or a parameter slot."""

    model_config = ConfigDict(frozen=True)

    literal: Optional[str] = None
    parameter: Optional[int] = Field(
        default=None, description="Index into LinkDefinition.parameters"
    )

    @property
    def is_parameter(self) -> bool:
        return self.parameter is not None


class LinkDefinition(BaseModel):
    """A schema-declared operation on a resource.

    The number of arguments a link accepts (:attr:`arity`) is fixed when the
    schema is loaded: one per path parameter, plus one trailing body argument
    when :attr:`has_body` is set.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Slug derived from the link title")
    title: str
    description: Optional[str] = None
    method: HTTPMethod
    href: str
    segments: list[UrlSegment] = Field(default_factory=list)
    parameters: list[LinkParameter] = Field(default_factory=list)
    has_body: bool = False
    enc_type: str = "application/json"
    range_field: Optional[str] = Field(
        default=None, description="Range field name enabling pagination"
    )

    @property
    def arity(self) -> int:
        """Number of positional arguments the link expects."""
        return len(self.parameters) + (1 if self.has_body else 0)

    @property
    def parameter_names(self) -> list[str]:
        """Declared argument names in order, ``body`` last when present."""
        names = [p.name for p in self.parameters]
        if self.has_body:
            names.append("body")
        return names


class PropertyDefinition(BaseModel):
    """A resource property, used for usage text only."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    example: Any = None


class ResourceSchema(BaseModel):
    """A named collection of links sharing a schema namespace."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    links: list[LinkDefinition] = Field(default_factory=list)
    properties: dict[str, PropertyDefinition] = Field(default_factory=dict)

    def link(self, name: str) -> Optional[LinkDefinition]:
        """Return the link named *name*, or ``None``."""
        for link in self.links:
            if link.name == name:
                return link
        return None


class ApiSchema(BaseModel):
    """The in-memory index built from a raw schema document."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    resources: dict[str, ResourceSchema] = Field(default_factory=dict)


# --- Exchange Models ---


class HttpRequest(BaseModel):
    """A concrete request produced by the link resolver."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None

    def with_header(self, name: str, value: str) -> HttpRequest:
        """Return a copy with header *name* replaced (case-insensitively) or added."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return self.model_copy(update={"headers": headers})


class HttpResponse(BaseModel):
    """Status, headers and raw body of one exchange."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""

    def header(self, name: str) -> Optional[str]:
        """Look up a response header case-insensitively."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def content_type(self) -> str:
        return self.header("Content-Type") or ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_partial(self) -> bool:
        return self.status_code == 206


class PageCursor(BaseModel):
    """Range cursor carried between the pages of one paginated call."""

    range: Optional[str] = Field(
        default=None, description="Range header sent for this page"
    )
    content_range: Optional[str] = None
    next_range: Optional[str] = None
    page: int = 0

    def advance(self, response: HttpResponse) -> PageCursor:
        """Return the cursor describing the page after *response*."""
        return PageCursor(
            range=self.next_range,
            content_range=response.header("Content-Range"),
            next_range=response.header("Next-Range"),
            page=self.page + 1,
        )


# --- Configuration Models ---


class ClientConfig(BaseModel):
    """Settings applied to every request a client sends."""

    base_url: str = Field(description="Root URL; its path prefixes every link")
    default_headers: dict[str, str] = Field(
        default_factory=lambda: {"Accept": "application/json"}
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: Optional[str] = None


class ProjectConfig(BaseModel):
    """Contents of an optional ``./linkli.json`` project file."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    schema_source: Optional[str] = Field(default=None, alias="schema")
    base_url: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = None
    verify_ssl: Optional[bool] = None
