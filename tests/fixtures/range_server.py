"""Fixture content and a local aiohttp server that honours Range requests."""

import typing as t
from dataclasses import dataclass, field

from aiohttp import hdrs, web

QUOTE = b"Beware, for I am fearless and therefore powerful"


def _build_content() -> bytes:
    lines = [
        f"{i:04d}: You seek for knowledge and wisdom, as I once did.\n".encode()
        for i in range(180)
    ]
    # Quote placed at a fixed offset so single-chunk fetches can be checked
    return b"".join(lines[:90]) + QUOTE + b"\n" + b"".join(lines[90:])


CONTENT: t.Final = _build_content()
QUOTE_OFFSET: t.Final = CONTENT.index(QUOTE)


@dataclass
class RangeServerConfig:
    """Behaviour of the local test server.

    Attributes:
        content: Bytes served for every path.
        etag: ETag sent with every response, or None for no ETag.
        changing_etag: Send a different ETag on every response.
        fail_offsets: Range starts answered with 500.
        ignore_range: Answer range requests with 200 and the full body.
        range_headers: Range header of every request received, in order.
    """

    content: bytes = CONTENT
    etag: str | None = '"v1"'
    changing_etag: bool = False
    fail_offsets: set[int] = field(default_factory=set)
    ignore_range: bool = False
    range_headers: list[str | None] = field(default_factory=list)


def make_range_app(config: RangeServerConfig) -> web.Application:
    async def handler(request: web.Request) -> web.Response:
        range_header = request.headers.get(hdrs.RANGE)
        config.range_headers.append(range_header)
        content = config.content

        headers: dict[str, str] = {}
        if config.changing_etag:
            headers[hdrs.ETAG] = f'"v{len(config.range_headers)}"'
        elif config.etag is not None:
            headers[hdrs.ETAG] = config.etag

        if range_header is None or config.ignore_range:
            return web.Response(body=content, headers=headers)

        requested = request.http_range
        start = requested.start or 0
        if start in config.fail_offsets:
            return web.Response(status=500)
        if start >= len(content):
            headers[hdrs.CONTENT_RANGE] = f"bytes */{len(content)}"
            return web.Response(status=416, headers=headers)

        stop = len(content) if requested.stop is None else min(requested.stop, len(content))
        headers[hdrs.CONTENT_RANGE] = f"bytes {start}-{stop - 1}/{len(content)}"
        return web.Response(status=206, body=content[start:stop], headers=headers)

    app = web.Application()
    app.router.add_get("/{name}", handler)
    return app


StartServer = t.Callable[..., t.Awaitable[str]]
