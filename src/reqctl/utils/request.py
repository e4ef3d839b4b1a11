r"""Helpers for sending the same request more than once."""

from __future__ import annotations

__all__ = ["clone_request"]

import httpx


def clone_request(request: httpx.Request) -> httpx.Request:
    """Return an independent copy of a request whose body has been read.

    Each attempt sends its own copy, so auth flows or event hooks that
    mutate a request cannot affect later attempts or the other race branch.

    Args:
        request: The request template. Its body must already be read
            (``await request.aread()`` for streaming bodies).

    Returns:
        A new request with the same method, URL, headers, body and
        extensions.

    Raises:
        httpx.RequestNotRead: If the body of the request was not read.

    Example:
        ```pycon
        >>> import httpx
        >>> from reqctl.utils.request import clone_request
        >>> request = httpx.Request("POST", "https://example.com", content=b"data")
        >>> copy = clone_request(request)
        >>> copy is request, copy.content, copy.method
        (False, b'data', 'POST')

        ```
    """
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=request.headers.copy(),
        content=request.content,
        extensions=dict(request.extensions),
    )
