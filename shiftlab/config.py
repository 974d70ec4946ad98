from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shiftlab.align import TIME_ALIGN_MARKER
from shiftlab.attribute import AD_IFRAME_MARKER, ContentFilter, snippet_marker_filter
from shiftlab.detect import LATENCY_BOUND_MS


class OffsetMode(str, Enum):
    OFF = "off"
    DIAGNOSTIC = "diagnostic"  # estimate and log, never applied
    APPLY = "apply"


@dataclass(frozen=True)
class AuditConfig:
    marker: str = AD_IFRAME_MARKER
    latency_bound_ms: float = LATENCY_BOUND_MS
    # Fixed offset for the synchronous path; `OffsetMode.APPLY` overrides it.
    offset_ms: float | None = None
    offset_mode: OffsetMode = OffsetMode.OFF
    time_align_marker: str = TIME_ALIGN_MARKER

    def content_filter(self) -> ContentFilter:
        return snippet_marker_filter(self.marker)
