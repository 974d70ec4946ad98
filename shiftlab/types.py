from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CausalWindow:
    start: float  # trigger start
    end: float  # bridge start + bridge duration


@dataclass(frozen=True)
class Attribution:
    id: str
    selector: str
    label: str
    snippet: str


@dataclass(frozen=True)
class AuditOutcome:
    attributions: tuple[Attribution, ...]
    windows: tuple[CausalWindow, ...]
    record_count: int
    offset_ms: float | None  # offset applied to record times, if any
    # Background alignment estimate (diagnostic mode); held so it is not collected.
    alignment: asyncio.Task[float] | None = field(default=None, compare=False, repr=False)
