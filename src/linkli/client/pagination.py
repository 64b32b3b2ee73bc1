"""Range pagination -- drain a multi-page (HTTP 206) result into one value.

A paginated collection arrives as a chain of ``206 Partial Content``
responses.  Each page carries ``Content-Range`` (informational, e.g.
``id 0..199; max=200``) and, unless it is the last page, ``Next-Range``: an
opaque cursor the client echoes back verbatim as the ``Range`` header of
the following request.

The engine is a small state machine driven by :func:`iter_items`::

    Requesting --(response)--> PageReceived
    PageReceived --(206 + Next-Range)--> Requesting   (Range := Next-Range)
    PageReceived --(otherwise)--------> Done

Pages are concatenated in fetch order; nothing is reordered or
de-duplicated.  Requests are strictly sequential because each cursor comes
from the previous response.  The cursor lives only inside one call.

Any error raised mid-chain propagates out of :func:`drain` before a result
exists, so partially accumulated pages are discarded.
"""

from __future__ import annotations

from typing import Any, Iterator

from linkli.client.executor import RequestExecutor, is_json_content_type
from linkli.models import HttpRequest, HttpResponse, LinkDefinition, PageCursor
from linkli.output import get_output


def drain(
    link: LinkDefinition,
    request: HttpRequest,
    executor: RequestExecutor,
) -> Any:
    """Execute *request* and return the complete result.

    A response that opens no chain is decoded and returned as-is: any
    non-206, a 206 without a JSON body, and a lone 206 page carrying no
    ``Next-Range`` (whose body is therefore the complete result).  When the
    first page names a ``Next-Range``, every page is fetched and the result
    is the list of all their elements.

    Args:
        link: The link being invoked (used for diagnostics).
        request: The first request, as built by
            :func:`~linkli.client.resolver.resolve`.
        executor: Executor used for every page.

    Returns:
        The decoded body, the aggregated list of items, raw bytes, or
        ``None`` for an empty body.
    """
    response = executor.execute(request)
    if not _is_paginated(response):
        return executor.decode(response)
    return list(_iter_pages(link, request, response, executor))


def iter_items(
    link: LinkDefinition,
    request: HttpRequest,
    executor: RequestExecutor,
) -> Iterator[Any]:
    """Lazily yield the items of *link*'s result, fetching pages on demand.

    Non-paginated list results are yielded element by element; any other
    non-empty result is yielded once.
    """
    response = executor.execute(request)
    if _is_paginated(response):
        yield from _iter_pages(link, request, response, executor)
        return

    result = executor.decode(response)
    if isinstance(result, list):
        yield from result
    elif result is not None:
        yield result


def _is_paginated(response: HttpResponse) -> bool:
    """A JSON 206 page that points at a following page."""
    return (
        response.is_partial
        and is_json_content_type(response.content_type)
        and response.header("Next-Range") is not None
    )


def _iter_pages(
    link: LinkDefinition,
    request: HttpRequest,
    response: HttpResponse,
    executor: RequestExecutor,
) -> Iterator[Any]:
    """Yield items page by page, following ``Next-Range`` until exhaustion."""
    output = get_output()
    cursor = PageCursor().advance(response)

    while True:
        output.debug(
            f"{link.name}: page {cursor.page} by {link.range_field or 'range'} "
            f"(Range: {cursor.range or '-'}, Content-Range: {cursor.content_range or '-'}, "
            f"Next-Range: {cursor.next_range or '-'})"
        )
        yield from _page_items(executor.decode(response))

        if not (response.is_partial and cursor.next_range):
            return

        request = request.with_header("Range", cursor.next_range)
        response = executor.execute(request)
        cursor = cursor.advance(response)


def _page_items(body: Any) -> list[Any]:
    """Return the elements one page contributes to the aggregate."""
    if body is None:
        return []
    if isinstance(body, list):
        return body
    return [body]
