"""Allow ``python -m simroute`` to launch the route runner."""

from __future__ import annotations

import sys


def main() -> None:
    from simroute import run
    raise SystemExit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
