"""
JSON fixture example

Runs the JSON variant the way the macro recorder's POST handler expects it:
every recorded macro is POSTed to http://localhost:1337/post as a JSON
document and acknowledged with {"result":"Ok"}.

Run:
  uv run python examples/json_fixture.py

Then try:
  curl -i http://127.0.0.1:1337/
  curl -i -X POST http://127.0.0.1:1337/post -d '{"action":"insert","text":"a"}'
  curl -i -X POST http://127.0.0.1:1337/post -d 'not json'   # connection drops
"""

from __future__ import annotations

import anyio

from macrofixture import ConsoleSink, FixtureServer, Variant


async def main() -> None:
    # parse_per_chunk mirrors the recorder fixture, which parsed every chunk on its own
    server = FixtureServer(Variant.JSON, sink=ConsoleSink(), parse_per_chunk=True)

    async with anyio.create_task_group() as tg:
        await tg.start(server.serve)

        print(f"Listening on {server.url}")
        print("Press Ctrl-C to stop.")


if __name__ == "__main__":
    try:
        anyio.run(main)
    except KeyboardInterrupt:
        print("Server stopped")
