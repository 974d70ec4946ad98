from __future__ import annotations

# Clock alignment between the element-insertion log and the trace.
#
# The page records element times on its own clock; the trace carries a
# user-timing mark emitted from the page at a known moment. The difference
# between the first mark and the first element record is the offset between
# the two clocks.

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from shiftlab.model import ElementRecord, UserTiming
from shiftlab.validate import EmptyMarkerSequence, EmptyRecordSequence

logger = logging.getLogger(__name__)

TIME_ALIGN_MARKER = "lh_timealign"


class UserTimingsSource(Protocol):
    async def compute_user_timings(self, trace: Any) -> Sequence[UserTiming]:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticUserTimings:
    """Serves user-timing marks that were already extracted from a trace."""

    timings: tuple[UserTiming, ...]

    async def compute_user_timings(self, trace: Any) -> Sequence[UserTiming]:
        return self.timings


class TimeBaseAligner:
    def __init__(
        self,
        source: UserTimingsSource,
        records: Sequence[ElementRecord],
        *,
        marker_name: str = TIME_ALIGN_MARKER,
    ) -> None:
        self._source = source
        self._records = tuple(records)
        self._marker_name = marker_name

    async def estimate_offset(self, trace: Any) -> float:
        timings = await self._source.compute_user_timings(trace)
        markers = [t for t in timings if t.name == self._marker_name]
        if not markers:
            raise EmptyMarkerSequence(
                f"no '{self._marker_name}' user timings found in trace"
            )
        if not self._records:
            raise EmptyRecordSequence("no element records to align against")

        # The first mark is assumed to be the earliest; marks are not re-sorted.
        offset = markers[0].start_time - self._records[0].time
        logger.info(
            "time-base offset %.3f ms from %d '%s' marks",
            offset,
            len(markers),
            self._marker_name,
        )
        return offset

    def start(self, trace: Any) -> asyncio.Task[float]:
        """Schedule `estimate_offset` without waiting for it.

        The outcome is only logged. Callers may drop the returned task; the
        estimate has no side effects beyond its own result.
        """

        task = asyncio.get_running_loop().create_task(self.estimate_offset(trace))
        task.add_done_callback(_log_outcome)
        return task


def _log_outcome(task: asyncio.Task[float]) -> None:
    if task.cancelled():
        logger.debug("time-base alignment abandoned")
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("time-base alignment failed: %s", exc)
        return
    logger.debug("time-base alignment finished (not applied): %.3f ms", task.result())
