"""The fixture server: an ``HttpServer`` wired to one variant's routes."""

from __future__ import annotations

import anyio

from .http.server import HttpServer
from .sink import ConsoleSink, LogSink
from .variants import Variant, build_routes


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 1337


class FixtureServer(HttpServer):
    """
    Fixture HTTP server for the macro recorder.

    Usage:
        async with anyio.create_task_group() as tg:
            server = FixtureServer(Variant.JSON, port=0)
            port = await tg.start(server.serve)
            ...
            tg.cancel_scope.cancel()
    """

    def __init__(
        self,
        variant: Variant = Variant.ECHO,
        *,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        sink: LogSink | None = None,
        parse_per_chunk: bool = False,
        reproduce_faults: bool = False,
        max_header_bytes: int = 64 * 1024,
        max_body_bytes: int = 1 * 1024 * 1024,
    ):
        sink = sink if sink is not None else ConsoleSink()
        super().__init__(
            build_routes(
                variant,
                sink,
                parse_per_chunk=parse_per_chunk,
                reproduce_faults=reproduce_faults,
            ),
            host=host,
            port=port,
            sink=sink,
            max_header_bytes=max_header_bytes,
            max_body_bytes=max_body_bytes,
        )
        self.variant = variant


def run(
    variant: Variant = Variant.ECHO,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    sink: LogSink | None = None,
) -> None:
    """Serve ``variant`` until interrupted. Blocks."""
    server = FixtureServer(variant, host=host, port=port, sink=sink)
    anyio.run(server.serve)
