from __future__ import annotations

# Causal-window detection over an ordered rendering-event trace.
#
# A window is opened by a style-recalculation trigger, bridged by a layer-tree
# update that starts within the latency bound, and confirmed by a layout shift
# that lands inside the bridge. Scans only move forward: the trace is already in
# chronological order, so a later index can never cause an earlier one.

import logging
import math
from collections.abc import Iterable, Mapping

from shiftlab.model import TimelineEntry, coerce_timeline
from shiftlab.types import CausalWindow

logger = logging.getLogger(__name__)

TRIGGER_EVENT = "ScheduleStyleRecalculation"
BRIDGE_EVENT = "UpdateLayerTree"
SHIFT_EVENT = "LayoutShift"

LATENCY_BOUND_MS = 20.0


def _undefined(duration: float | None) -> bool:
    return duration is None or math.isnan(duration)


def detect(
    timeline: Iterable[TimelineEntry | Mapping],
    *,
    latency_bound_ms: float = LATENCY_BOUND_MS,
) -> list[CausalWindow]:
    events = coerce_timeline(timeline)
    n = len(events)
    windows: list[CausalWindow] = []
    shifts = [e for e in events if e.event_name == SHIFT_EVENT]
    # Shift events must carry a defined duration (0 for instant events);
    # a missing or null duration excludes the shift from every window.
    if shifts and all(_undefined(e.duration) for e in shifts):
        logger.warning(
            "all %d '%s' entries have an undefined duration and were skipped; "
            "supply duration 0 for instant shift events",
            len(shifts),
            SHIFT_EVENT,
        )

    for i in range(n):
        if events[i].event_name != TRIGGER_EVENT:
            continue
        trigger_start = events[i].timing
        limit = trigger_start + latency_bound_ms

        for j in range(i + 1, n):
            bridge = events[j]
            if bridge.event_name != BRIDGE_EVENT:
                continue
            if not (trigger_start <= bridge.timing < limit):
                continue
            # A bridge without a duration has no end; it can contain nothing.
            if _undefined(bridge.duration):
                continue
            bridge_start = bridge.timing
            bridge_end = bridge_start + bridge.duration

            for k in range(j + 1, n):
                shift = events[k]
                if shift.event_name != SHIFT_EVENT:
                    continue
                if _undefined(shift.duration):
                    continue
                if bridge_start <= shift.timing <= bridge_end:
                    windows.append(CausalWindow(start=trigger_start, end=bridge_end))

    logger.debug("detected %d causal windows in %d timeline entries", len(windows), n)
    return windows
