from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from shiftlab.align import StaticUserTimings
from shiftlab.audit import run_audit_async, summarize
from shiftlab.config import AuditConfig, OffsetMode
from shiftlab.io import format_summary_json, load_dom_timeline
from shiftlab.validate import AlignmentError, InputShapeError


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shiftlab", description="Attribute layout shifts to injected elements"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    att = sub.add_parser("attribute", help="Attribute layout shifts for one artifact")
    att.add_argument("--artifact", required=True, type=Path)
    att.add_argument(
        "--marker",
        required=False,
        default=AuditConfig.marker,
        help="Snippet substring an element must contain to be attributed",
    )
    att.add_argument(
        "--latency-bound-ms",
        required=False,
        type=float,
        default=AuditConfig.latency_bound_ms,
    )
    att.add_argument("--offset-ms", required=False, type=float, default=None)
    att.add_argument(
        "--offset-mode",
        required=False,
        choices=[m.value for m in OffsetMode],
        default=OffsetMode.OFF.value,
    )
    att.add_argument(
        "--log-level",
        required=False,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    if args.cmd == "attribute":
        logging.basicConfig(
            level=args.log_level,
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        )
        config = AuditConfig(
            marker=args.marker,
            latency_bound_ms=args.latency_bound_ms,
            offset_ms=args.offset_ms,
            offset_mode=OffsetMode(args.offset_mode),
        )
        try:
            dom_timeline = load_dom_timeline(args.artifact)
            outcome = asyncio.run(
                run_audit_async(
                    dom_timeline,
                    trace=None,
                    source=StaticUserTimings(dom_timeline.user_timings),
                    config=config,
                )
            )
        except (InputShapeError, AlignmentError) as e:
            sys.stderr.write(f"shiftlab: {e}\n")
            return 2

        sys.stdout.write(format_summary_json(summarize(outcome)) + "\n")
        return 0

    raise AssertionError(f"Unhandled command: {args.cmd}")
