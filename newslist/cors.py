"""Cross-origin headers for the HTTP API."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable

log = logging.getLogger(__name__)

Scope = dict[str, Any]
Message = dict[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]


def cors_headers(origin: str) -> dict[str, str]:
    """Headers that allow the given origin; none when the origin is empty."""
    if not origin:
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE,UPDATE",
        "Access-Control-Allow-Headers": "Authorization, Content-Length, X-CSRF-Token, Token,session",
        "Access-Control-Expose-Headers": "Content-Length, Access-Control-Allow-Origin, Access-Control-Allow-Headers",
        "Access-Control-Max-Age": "172800",
        "Access-Control-Allow-Credentials": "true",
    }


def _encode(headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
    return [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]


def _merge(existing: list[Any], extra: list[tuple[bytes, bytes]]) -> list[Any]:
    names = {name for name, _ in extra}
    kept = [(bytes(n), bytes(v)) for n, v in existing if bytes(n).lower() not in names]
    return kept + extra


class CORSMiddleware:
    """ASGI middleware echoing the request origin, answering preflights itself
    and logging exceptions raised by the wrapped application."""

    def __init__(self, app: Callable[[Scope, Receive, Send], Awaitable[None]]) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        origin = ""
        for name, value in scope.get("headers", []):
            if bytes(name).lower() == b"origin":
                origin = bytes(value).decode("latin-1")
                break
        extra = _encode(cors_headers(origin))

        if scope.get("method") == "OPTIONS":
            body = json.dumps("ok!").encode("utf-8")
            await send(
                {
                    "type": "http.response.start",
                    "status": 200,
                    "headers": extra + [(b"content-type", b"application/json; charset=utf-8")],
                }
            )
            await send({"type": "http.response.body", "body": body})
            return

        started = False

        async def wrapped(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
                message = dict(message)
                message["headers"] = _merge(list(message.get("headers", [])), extra)
            await send(message)

        try:
            await self.app(scope, receive, wrapped)
        except Exception as exc:  # noqa: BLE001 - the handler's failure is only logged
            log.error("Panic info is: %s", exc)
            if not started:
                await send({"type": "http.response.start", "status": 200, "headers": extra})
                await send({"type": "http.response.body", "body": b""})