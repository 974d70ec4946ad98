from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shiftlab.model import DomTimeline


class InputShapeError(ValueError):
    pass


class AlignmentError(ValueError):
    pass


class EmptyMarkerSequence(AlignmentError):
    pass


class EmptyRecordSequence(AlignmentError):
    pass


def validate_dom_timeline(dom_timeline: DomTimeline) -> None:
    """Reject artifacts whose sequences break the chronological-order contract.

    Detection and attribution rely on both sequences already being sorted;
    neither one re-sorts its input.
    """

    prev = None
    for idx, entry in enumerate(dom_timeline.timeline):
        if prev is not None and entry.timing < prev:
            raise InputShapeError(
                (
                    f"timeline entry {idx} ('{entry.event_name}') at {entry.timing} ms "
                    f"is earlier than the previous entry at {prev} ms"
                )
            )
        prev = entry.timing

    prev = None
    for idx, record in enumerate(dom_timeline.records):
        if prev is not None and record.time < prev:
            raise InputShapeError(
                (
                    f"element record {idx} ('{record.id}') at {record.time} ms "
                    f"is earlier than the previous record at {prev} ms"
                )
            )
        prev = record.time
