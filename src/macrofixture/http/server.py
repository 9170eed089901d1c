"""Tiny HTTP/1.1 server built on AnyIO.

It parses the request head itself and hands each request to a ``RouteTable``.

Features:
- HTTP/1.1 request line + headers parsing
- Bodies by Content-Length or chunked transfer encoding, kept as the list of
  chunks the transport delivered
- One request per connection (Connection: close)
- Handler faults drop the connection instead of producing an error response
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import anyio
from anyio.abc import SocketAttribute, SocketStream, TaskStatus
from anyio.streams.buffered import BufferedByteReceiveStream

from ..errors import PayloadTooLarge
from ..sink import ConsoleSink, LogSink
from .routes import RouteTable


HeaderMap = dict[str, str]


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    path: str
    version: str
    headers: HeaderMap
    chunks: tuple[bytes, ...] = ()
    encoding: str = "utf-8"

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)

    def text(self, errors: str = "strict") -> str:
        return self.body.decode(self.encoding, errors)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int = 200
    headers: Mapping[str, str] | None = None
    body: bytes = b""

    @staticmethod
    def text(
        text: str,
        *,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> "HttpResponse":
        body = text.encode(encoding)
        merged: dict[str, str] = {"content-type": f"text/plain; charset={encoding}"}
        if headers:
            merged.update({k.lower(): v for k, v in headers.items()})
        return HttpResponse(status=status, headers=merged, body=body)


_STATUS_TEXT: dict[int, str] = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    413: "Payload Too Large",
}


def _status_line(status: int) -> str:
    text = _STATUS_TEXT.get(status, "OK")
    return f"HTTP/1.1 {status} {text}\r\n"


def _normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {k.lower(): v for k, v in headers.items()}


def _parse_headers(block: bytes) -> tuple[str, str, str, HeaderMap]:
    # block contains request line + headers, without the terminating blank line
    head = block.decode("iso-8859-1")

    lines = head.split("\r\n")
    if not lines or not lines[0]:
        raise ValueError("missing request line")

    parts = lines[0].split(" ")
    if len(parts) != 3:
        raise ValueError("invalid request line")
    method, path, version = parts
    if not version.startswith("HTTP/"):
        raise ValueError("invalid http version")

    headers: HeaderMap = {}
    for line in lines[1:]:
        if line == "":
            break
        if ":" not in line:
            continue
        k, v = line.split(":", 1)
        headers[k.strip().lower()] = v.strip()
    return method, path, version, headers


async def _read_sized(
    reader: BufferedByteReceiveStream, length: int, max_bytes: int
) -> tuple[bytes, ...]:
    if length > max_bytes:
        raise PayloadTooLarge(f"{length} > {max_bytes}")

    chunks: list[bytes] = []
    remaining = length
    while remaining:
        try:
            chunk = await reader.receive(min(remaining, 65536))
        except anyio.EndOfStream:
            raise anyio.IncompleteRead from None
        chunks.append(chunk)
        remaining -= len(chunk)
    return tuple(chunks)


async def _read_chunked(reader: BufferedByteReceiveStream, max_bytes: int) -> tuple[bytes, ...]:
    chunks: list[bytes] = []
    total = 0
    while True:
        try:
            size_line = await reader.receive_until(b"\r\n", 1024)
        except anyio.DelimiterNotFound:
            raise ValueError("chunk size line too long") from None
        try:
            size = int(size_line.split(b";", 1)[0].strip(), 16)
        except ValueError:
            raise ValueError(f"invalid chunk size: {size_line!r}") from None
        if size < 0:
            raise ValueError(f"invalid chunk size: {size_line!r}")
        if size == 0:
            # trailer section, terminated by an empty line
            while await reader.receive_until(b"\r\n", 8192):
                pass
            return tuple(chunks)

        total += size
        if total > max_bytes:
            raise PayloadTooLarge(f"chunked body exceeds {max_bytes}")
        chunks.append(await reader.receive_exactly(size))
        if await reader.receive_exactly(2) != b"\r\n":
            raise ValueError("missing CRLF after chunk data")


async def _write_response(stream: SocketStream, response: HttpResponse) -> None:
    headers = _normalize_headers(response.headers)
    body = response.body or b""

    headers.setdefault("content-length", str(len(body)))
    headers.setdefault("connection", "close")

    start = _status_line(response.status).encode("ascii")
    head = b"".join(f"{k}: {v}\r\n".encode("latin-1") for k, v in headers.items())

    await stream.send(start + head + b"\r\n" + body)


class HttpServer:
    """HTTP server bound to one TCP listener.

    Nothing happens at construction time; ``serve()`` binds the listener and
    handles each connection in its own task until cancelled. Start it with
    ``await task_group.start(server.serve)`` to get the bound port back.
    """

    def __init__(
        self,
        router: RouteTable,
        *,
        host: str = "127.0.0.1",
        port: int = 0,
        sink: LogSink | None = None,
        max_header_bytes: int = 64 * 1024,
        max_body_bytes: int = 1 * 1024 * 1024,
    ):
        self.router = router
        self.sink: LogSink = sink if sink is not None else ConsoleSink()
        self._host = host
        self._port = port
        self._max_header_bytes = max_header_bytes
        self._max_body_bytes = max_body_bytes
        # anyio.create_tcp_listener() returns a MultiListener; extra() still works on it.
        self._listener: Any = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        if self._listener is not None:
            return self._listener.extra(SocketAttribute.local_port)
        return self._port

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self.port}"

    async def serve(self, *, task_status: TaskStatus[int] = anyio.TASK_STATUS_IGNORED) -> None:
        self._listener = await anyio.create_tcp_listener(
            local_host=self._host, local_port=self._port
        )
        try:
            async with self._listener:
                self.sink.log("Server running")
                task_status.started(self.port)
                await self._listener.serve(self._handle_client)
        finally:
            self._listener = None

    async def _handle_client(self, stream: SocketStream) -> None:
        async with stream:
            try:
                response = await self._respond(stream)
                if response is not None:
                    await _write_response(stream, response)
            except (anyio.IncompleteRead, anyio.BrokenResourceError, anyio.ClosedResourceError):
                # client went away mid-request; nobody is left to answer
                return

    async def _respond(self, stream: SocketStream) -> HttpResponse | None:
        reader = BufferedByteReceiveStream(stream)
        try:
            request = await self._read_request(reader)
        except anyio.DelimiterNotFound:
            return HttpResponse.text("bad request: request head too large", status=400)
        except PayloadTooLarge:
            return HttpResponse.text("payload too large", status=413)
        except ValueError as e:
            return HttpResponse.text(f"bad request: {e}", status=400)

        try:
            return await self.router.dispatch(request)
        except Exception as e:
            self.sink.log(f"fault: {e!r}")
            return None

    async def _read_request(self, reader: BufferedByteReceiveStream) -> HttpRequest:
        header_block = await reader.receive_until(b"\r\n\r\n", self._max_header_bytes)
        method, path, version, headers = _parse_headers(header_block)

        chunks: tuple[bytes, ...] = ()
        if "chunked" in headers.get("transfer-encoding", "").lower():
            chunks = await _read_chunked(reader, self._max_body_bytes)
        else:
            try:
                content_length = int(headers.get("content-length", "0") or "0")
            except ValueError:
                raise ValueError("invalid content-length") from None
            if content_length < 0:
                raise ValueError("invalid content-length")
            if content_length:
                chunks = await _read_sized(reader, content_length, self._max_body_bytes)

        return HttpRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            chunks=chunks,
        )
