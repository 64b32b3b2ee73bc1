"""Build the in-memory schema index from a raw hyper-schema document.

This module walks ``definitions.<resource>.links[]`` and produces an
:class:`~linkli.models.ApiSchema`: one :class:`~linkli.models.ResourceSchema`
per resource, each holding its :class:`~linkli.models.LinkDefinition` list and
property definitions.

Everything a link needs at call time is computed here, once:

* the ``href`` template is split into literal and parameter
  :class:`~linkli.models.UrlSegment` values;
* each ``{(<pointer>)}`` placeholder becomes a
  :class:`~linkli.models.LinkParameter` whose name is taken from the
  pointer target (``anyOf``/``oneOf`` targets become ``a|b`` choices);
* ``has_body`` is set for POST/PUT/PATCH links that declare a ``schema``;
* the optional pagination hint is reduced to a range field name.

The single public entry point is :func:`extract_schema`.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from linkli.exceptions import SchemaError
from linkli.models import (
    BODY_METHODS,
    ApiSchema,
    HTTPMethod,
    LinkDefinition,
    LinkParameter,
    PropertyDefinition,
    ResourceSchema,
    UrlSegment,
)
from linkli.parser.loader import validate_schema_document
from linkli.parser.resolver import pointer_segments, resolve_pointer

# {(%23%2Fdefinitions%2Fapp%2Fdefinitions%2Fid)} or the plain {id} form.
_PLACEHOLDER = re.compile(r"\{(?:\(([^)]+)\)|([^{}()]+))\}")

_SUPPORTED_METHODS = frozenset(m.value for m in HTTPMethod)


def extract_schema(document: dict[str, Any]) -> ApiSchema:
    """Extract an :class:`~linkli.models.ApiSchema` from a raw schema dict.

    Args:
        document: The raw document as returned by
            :func:`~linkli.parser.loader.load_schema`.

    Returns:
        The immutable schema index, resources in document order.

    Raises:
        SchemaError: If ``definitions`` is missing, a link uses an
            unsupported method, a placeholder cannot be resolved, or two
            links of one resource share a name.

    Example::

        schema = extract_schema(load_schema("heroku.json"))
        for link in schema.resources["app"].links:
            print(link.method.value, link.href)
    """
    definitions = validate_schema_document(document)

    resources: dict[str, ResourceSchema] = {}
    for name, definition in definitions.items():
        if not isinstance(definition, dict):
            continue
        resources[name] = _extract_resource(document, name, definition)

    return ApiSchema(
        title=document.get("title"),
        description=document.get("description"),
        resources=resources,
    )


def link_slug(title: str) -> str:
    """Turn a link title into a command-friendly slug.

    ``"List"`` -> ``"list"``, ``"Info by Name"`` -> ``"info-by-name"``.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "link"


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def _extract_resource(
    document: dict[str, Any],
    name: str,
    definition: dict[str, Any],
) -> ResourceSchema:
    links: list[LinkDefinition] = []
    seen: set[str] = set()
    for index, raw_link in enumerate(definition.get("links") or []):
        if not isinstance(raw_link, dict):
            raise SchemaError(f"Link {index} of resource '{name}' must be an object")
        link = _extract_link(document, name, raw_link)
        if link.name in seen:
            raise SchemaError(
                f"Resource '{name}' declares more than one link named '{link.name}'"
            )
        seen.add(link.name)
        links.append(link)

    return ResourceSchema(
        name=name,
        title=definition.get("title"),
        description=definition.get("description"),
        links=links,
        properties=_extract_properties(document, definition),
    )


def _extract_properties(
    document: dict[str, Any],
    definition: dict[str, Any],
) -> dict[str, PropertyDefinition]:
    """Collect property definitions, falling back to nested ``definitions``."""
    raw = definition.get("properties") or definition.get("definitions") or {}
    properties: dict[str, PropertyDefinition] = {}
    for prop_name, prop in raw.items():
        if not isinstance(prop, dict):
            continue
        if "$ref" in prop:
            prop = resolve_pointer(document, prop["$ref"])
            if not isinstance(prop, dict):
                continue
        prop_type = prop.get("type")
        if isinstance(prop_type, list):
            prop_type = "|".join(str(t) for t in prop_type)
        properties[prop_name] = PropertyDefinition(
            name=prop_name,
            description=prop.get("description"),
            type=prop_type,
            example=prop.get("example"),
        )
    return properties


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def _extract_link(
    document: dict[str, Any],
    resource_name: str,
    raw: dict[str, Any],
) -> LinkDefinition:
    method_value = str(raw.get("method", "GET")).upper()
    if method_value not in _SUPPORTED_METHODS:
        raise SchemaError(
            f"Unsupported method '{raw.get('method')}' in resource '{resource_name}'"
        )
    method = HTTPMethod(method_value)

    href = raw.get("href")
    if not isinstance(href, str) or not href:
        raise SchemaError(f"Link in resource '{resource_name}' has no href")

    title = raw.get("title") or raw.get("rel") or f"{method.value} {href}"
    segments, parameters = _parse_href(document, href)

    return LinkDefinition(
        name=link_slug(title),
        title=title,
        description=raw.get("description"),
        method=method,
        href=href,
        segments=segments,
        parameters=parameters,
        has_body=method in BODY_METHODS and "schema" in raw,
        enc_type=raw.get("encType") or "application/json",
        range_field=_range_field(raw),
    )


def _parse_href(
    document: dict[str, Any],
    href: str,
) -> tuple[list[UrlSegment], list[LinkParameter]]:
    """Split *href* into literal and parameter segments."""
    segments: list[UrlSegment] = []
    parameters: list[LinkParameter] = []
    position = 0

    for match in _PLACEHOLDER.finditer(href):
        if match.start() > position:
            segments.append(UrlSegment(literal=href[position:match.start()]))
        pointer, plain = match.group(1), match.group(2)
        if pointer is not None:
            parameter = _pointer_parameter(document, pointer)
        else:
            parameter = LinkParameter(name=plain.strip())
        segments.append(UrlSegment(parameter=len(parameters)))
        parameters.append(parameter)
        position = match.end()

    if position < len(href):
        segments.append(UrlSegment(literal=href[position:]))

    return segments, parameters


def _pointer_parameter(document: dict[str, Any], pointer: str) -> LinkParameter:
    """Name a parameter after the definition its pointer designates."""
    target = resolve_pointer(document, pointer)
    segments = pointer_segments(pointer)
    default_name = segments[-1] if segments else "id"

    if not isinstance(target, dict):
        return LinkParameter(name=default_name, pointer=pointer)

    options = target.get("anyOf") or target.get("oneOf")
    if isinstance(options, list) and options:
        choices = [_option_name(option, i) for i, option in enumerate(options)]
        return LinkParameter(
            name="|".join(choices),
            pointer=pointer,
            description=target.get("description"),
            choices=choices,
        )

    return LinkParameter(
        name=default_name,
        pointer=pointer,
        description=target.get("description"),
    )


def _option_name(option: Any, index: int) -> str:
    if isinstance(option, dict):
        ref = option.get("$ref")
        if isinstance(ref, str):
            segments = pointer_segments(ref)
            if segments:
                return segments[-1]
        if option.get("title"):
            return str(option["title"])
    return f"option{index}"


def _range_field(raw: dict[str, Any]) -> Optional[str]:
    """Reduce the link's pagination hint to a range field name.

    Accepts ``"pagination": "id"``, ``"pagination": {"range": "id"}`` (or
    ``{"field": "id"}``), and the ``"ranges": ["id", "name"]`` form, whose
    first entry wins.
    """
    hint = raw.get("pagination")
    if isinstance(hint, str) and hint:
        return hint
    if isinstance(hint, dict):
        field = hint.get("range") or hint.get("field")
        if field:
            return str(field)
    ranges = raw.get("ranges")
    if isinstance(ranges, list) and ranges:
        return str(ranges[0])
    return None
