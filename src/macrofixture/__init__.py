"""Local HTTP fixture server for exercising the change macro recorder."""

from .errors import FixtureFault, PayloadTooLarge, UndefinedResponseError
from .sink import ConsoleSink, LogSink, MemorySink
from .http import ANY_PATH, HttpRequest, HttpResponse, HttpServer, RouteTable
from .variants import Variant, build_routes
from .fixture import DEFAULT_HOST, DEFAULT_PORT, FixtureServer, run

__all__ = [
    # Server
    "FixtureServer",
    "HttpServer",
    "run",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    # Variants
    "Variant",
    "build_routes",
    # HTTP
    "HttpRequest",
    "HttpResponse",
    "RouteTable",
    "ANY_PATH",
    # Logging
    "LogSink",
    "ConsoleSink",
    "MemorySink",
    # Errors
    "FixtureFault",
    "UndefinedResponseError",
    "PayloadTooLarge",
]
