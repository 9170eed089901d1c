"""Dispatch table mapping (method, path-pattern) to handlers."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from .server import HttpRequest, HttpResponse


ANY_PATH = "*"

Handler = Callable[["HttpRequest"], Awaitable["HttpResponse"]]


class RouteTable:
    """A very small router.

    Keys are ``(METHOD, path)`` where ``path`` is either an exact request path
    or ``ANY_PATH``. Exact paths win over the wildcard. Requests that match no
    key go to ``fallback``.
    """

    def __init__(self, routes: Mapping[tuple[str, str], Handler], fallback: Handler):
        self._routes: dict[tuple[str, str], Handler] = {
            (method.upper(), path): handler for (method, path), handler in routes.items()
        }
        self._fallback = fallback

    def resolve(self, method: str, path: str) -> Handler:
        method = method.upper()
        handler = self._routes.get((method, path))
        if handler is None:
            handler = self._routes.get((method, ANY_PATH))
        return handler or self._fallback

    async def dispatch(self, request: "HttpRequest") -> "HttpResponse":
        handler = self.resolve(request.method, request.path)
        return await handler(request)

    def __contains__(self, key: tuple[str, str]) -> bool:
        method, path = key
        return (method.upper(), path) in self._routes
