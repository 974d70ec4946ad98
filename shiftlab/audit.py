from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

from shiftlab.align import TimeBaseAligner, UserTimingsSource
from shiftlab.attribute import attribute
from shiftlab.config import AuditConfig, OffsetMode
from shiftlab.detect import detect
from shiftlab.model import DomTimeline
from shiftlab.types import AuditOutcome
from shiftlab.validate import validate_dom_timeline

logger = logging.getLogger(__name__)


def _attribute_with(
    dom_timeline: DomTimeline, config: AuditConfig, offset_ms: float | None
) -> AuditOutcome:
    windows = detect(dom_timeline.timeline, latency_bound_ms=config.latency_bound_ms)
    attributions = attribute(
        dom_timeline.records,
        windows,
        config.content_filter(),
        offset_ms=offset_ms,
    )
    logger.debug(
        "audit: %d element records, %d causal windows, %d attributions",
        len(dom_timeline.records),
        len(windows),
        len(attributions),
    )
    return AuditOutcome(
        attributions=tuple(attributions),
        windows=tuple(windows),
        record_count=len(dom_timeline.records),
        offset_ms=offset_ms,
    )


def run_audit(
    dom_timeline: DomTimeline, *, config: AuditConfig = AuditConfig()
) -> AuditOutcome:
    validate_dom_timeline(dom_timeline)
    return _attribute_with(dom_timeline, config, config.offset_ms)


async def run_audit_async(
    dom_timeline: DomTimeline,
    *,
    trace: Any,
    source: UserTimingsSource,
    config: AuditConfig = AuditConfig(),
) -> AuditOutcome:
    """Audit with clock alignment driven by `config.offset_mode`.

    - OFF: the aligner is not started.
    - DIAGNOSTIC: the aligner runs in the background and is only logged.
    - APPLY: the aligner is awaited and its offset shifts every record time.
      Alignment failures propagate.
    """

    validate_dom_timeline(dom_timeline)
    mode = OffsetMode(config.offset_mode)
    if mode is OffsetMode.OFF:
        return _attribute_with(dom_timeline, config, config.offset_ms)

    aligner = TimeBaseAligner(
        source, dom_timeline.records, marker_name=config.time_align_marker
    )
    if mode is OffsetMode.DIAGNOSTIC:
        alignment = aligner.start(trace)
        # One yield so the estimate can start; it is never awaited.
        await asyncio.sleep(0)
        outcome = _attribute_with(dom_timeline, config, config.offset_ms)
        return dataclasses.replace(outcome, alignment=alignment)

    offset = await aligner.estimate_offset(trace)
    return _attribute_with(dom_timeline, config, offset)


def summarize(outcome: AuditOutcome) -> dict[str, Any]:
    return {
        "record_count": outcome.record_count,
        "window_count": len(outcome.windows),
        "attribution_count": len(outcome.attributions),
        "offset_ms": outcome.offset_ms,
        "attributions": [
            {
                "id": a.id,
                "selector": a.selector,
                "label": a.label,
                "snippet": a.snippet,
            }
            for a in outcome.attributions
        ],
    }
