"""
The fixture variants and their handlers.

Each variant is a route table:

  echo: GET /       -> test banner
        POST /post  -> echo the raw body back
  json: GET *       -> recorder banner
        POST *      -> parse JSON, reply {"result":"Ok"}
  ack:  GET *       -> recorder banner
        POST *      -> log each chunk, reply "Ok"

Everything else falls through to a 404.
"""

from __future__ import annotations

import codecs
import functools
import json
from enum import Enum
from urllib.parse import parse_qs

from .errors import UndefinedResponseError
from .http.routes import ANY_PATH, Handler, RouteTable
from .http.server import HttpRequest, HttpResponse
from .sink import LogSink


TEST_BANNER = "This is a test HTTP server!\n"
RECORDER_BANNER = "This is a ChangeMacroRecorder HTTP server!\n"
NOT_FOUND = "Not Found!\n"
POST_PATH = "/post"


class Variant(Enum):
    ECHO = "echo"
    JSON = "json"
    ACK = "ack"

    @property
    def banner(self) -> str:
        return TEST_BANNER if self is Variant.ECHO else RECORDER_BANNER

    @property
    def faulty_not_found(self) -> bool:
        """True for the variants whose original 404 branch never produced a response."""
        return self is not Variant.ECHO


async def banner(text: str, _req: HttpRequest) -> HttpResponse:
    return HttpResponse.text(text)


async def not_found(_req: HttpRequest) -> HttpResponse:
    return HttpResponse.text(NOT_FOUND, status=404)


async def undefined_not_found(_req: HttpRequest) -> HttpResponse:
    raise UndefinedResponseError("respond")


async def echo_body(sink: LogSink, req: HttpRequest) -> HttpResponse:
    data = req.text(errors="replace")
    # parsed for parity with the form-encoded fixture; only the raw body is used
    parse_qs(data, keep_blank_values=True)
    sink.log(data)
    return HttpResponse(status=200, body=req.body)


async def accept_json(sink: LogSink, parse_per_chunk: bool, req: HttpRequest) -> HttpResponse:
    if parse_per_chunk:
        for chunk in req.chunks:
            sink.log(repr(json.loads(chunk.decode(req.encoding))))
    else:
        sink.log(repr(json.loads(req.text())))

    # no content-type on success, same as the recorder fixture
    return HttpResponse(status=200, body=json.dumps({"result": "Ok"}, separators=(",", ":")).encode("utf-8"))


async def acknowledge(sink: LogSink, req: HttpRequest) -> HttpResponse:
    # one decoder across chunks so a character split between chunks survives
    decoder = codecs.getincrementaldecoder(req.encoding)(errors="replace")
    for chunk in req.chunks:
        text = decoder.decode(chunk)
        if text:
            sink.log(text)
    tail = decoder.decode(b"", final=True)
    if tail:
        sink.log(tail)
    return HttpResponse(status=200, body=b"Ok")


def build_routes(
    variant: Variant,
    sink: LogSink,
    *,
    parse_per_chunk: bool = False,
    reproduce_faults: bool = False,
) -> RouteTable:
    """Build the dispatch table for ``variant``.

    ``parse_per_chunk`` only affects the json variant. ``reproduce_faults``
    makes the 404 path of the json and ack variants fault instead of
    answering, matching the scripts they were taken from.
    """
    routes: dict[tuple[str, str], Handler]
    match variant:
        case Variant.ECHO:
            routes = {
                ("GET", "/"): functools.partial(banner, variant.banner),
                ("POST", POST_PATH): functools.partial(echo_body, sink),
            }
        case Variant.JSON:
            routes = {
                ("GET", ANY_PATH): functools.partial(banner, variant.banner),
                ("POST", ANY_PATH): functools.partial(accept_json, sink, parse_per_chunk),
            }
        case Variant.ACK:
            routes = {
                ("GET", ANY_PATH): functools.partial(banner, variant.banner),
                ("POST", ANY_PATH): functools.partial(acknowledge, sink),
            }
        case _:
            raise ValueError(f"unknown variant: {variant!r}")

    fallback = undefined_not_found if reproduce_faults and variant.faulty_not_found else not_found
    return RouteTable(routes, fallback)
