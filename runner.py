from __future__ import annotations

"""Repo-root convenience shim for running the shiftlab CLI from a checkout.

    python runner.py attribute --artifact dom_timeline.json

It delegates to the canonical entry point:

    python -m shiftlab
"""

import sys


def main() -> int:
    """Run the shiftlab CLI.

    Arguments are forwarded exactly as in `python -m shiftlab`.
    """

    from shiftlab.cli import main as cli_main

    return cli_main(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
