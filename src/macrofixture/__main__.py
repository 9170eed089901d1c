"""
Run a fixture server on 127.0.0.1:1337.

  python -m macrofixture          # raw-echo variant
  python -m macrofixture json     # JSON variant
  python -m macrofixture ack      # plain-ack variant

Then try:
  curl -i http://127.0.0.1:1337/
  curl -i -X POST http://127.0.0.1:1337/post -d 'a=1&b=2'
"""

from __future__ import annotations

import sys

from .fixture import run
from .variants import Variant


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    names = [v.value for v in Variant]
    if len(args) > 1 or (args and args[0] not in names):
        print(f"Usage: python -m macrofixture [{'|'.join(names)}]", file=sys.stderr)
        return 2

    variant = Variant(args[0]) if args else Variant.ECHO
    try:
        run(variant)
    except KeyboardInterrupt:
        print("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
