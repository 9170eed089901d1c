"""HTTP plumbing for the fixture server.

A small HTTP/1.1 server implemented with AnyIO sockets and a dispatch table.
"""

from .routes import ANY_PATH, RouteTable
from .server import HttpRequest, HttpResponse, HttpServer

__all__ = [
    "ANY_PATH",
    "HttpRequest",
    "HttpResponse",
    "HttpServer",
    "RouteTable",
]
