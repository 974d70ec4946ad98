from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from shiftlab.validate import InputShapeError


def _pick(obj: Mapping[str, Any], keys: tuple[str, ...], what: str) -> Any:
    for key in keys:
        if key in obj and obj[key] is not None:
            return obj[key]
    raise InputShapeError(f"{what} is missing required field '{keys[0]}'")


def _number(value: Any, field: str, what: str) -> float:
    # bool is an int subclass; a flag where a time belongs is a shape error.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputShapeError(f"{what} field '{field}' must be a number (got {value!r})")
    return float(value)


def _finite(value: Any, field: str, what: str) -> float:
    v = _number(value, field, what)
    if not math.isfinite(v):
        raise InputShapeError(f"{what} field '{field}' must be finite (got {v})")
    return v


def _mapping(obj: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise InputShapeError(f"{what} must be an object (got {type(obj).__name__})")
    return obj


@dataclass(frozen=True)
class TimelineEntry:
    event_name: str
    timing: float
    # NaN marks an undefined duration (instant events carry none).
    duration: float = math.nan

    @property
    def has_duration(self) -> bool:
        return self.duration is not None and not math.isnan(self.duration)

    @staticmethod
    def from_json(obj: Any) -> "TimelineEntry":
        obj = _mapping(obj, "timeline entry")
        event = obj.get("event")
        if "eventName" in obj or "name" in obj:
            name = _pick(obj, ("eventName", "name"), "timeline entry")
        elif isinstance(event, Mapping):
            name = _pick(event, ("name",), "timeline entry event")
        else:
            raise InputShapeError("timeline entry is missing required field 'eventName'")

        timing = _finite(_pick(obj, ("timing",), "timeline entry"), "timing", "timeline entry")
        if timing < 0:
            raise InputShapeError(f"timeline entry timing must be >= 0 (got {timing})")

        raw_duration = obj.get("duration")
        duration = (
            math.nan
            if raw_duration is None
            else _number(raw_duration, "duration", "timeline entry")
        )
        return TimelineEntry(event_name=str(name), timing=timing, duration=duration)


@dataclass(frozen=True)
class ElementRecord:
    time: float
    id: str  # devtools node path; stable across the insertion log
    selector: str
    label: str
    snippet: str  # raw markup, matched by the content filter

    @staticmethod
    def from_json(obj: Any) -> "ElementRecord":
        obj = _mapping(obj, "element record")
        time = _finite(_pick(obj, ("time",), "element record"), "time", "element record")
        node_id = _pick(obj, ("id", "devtoolsNodePath"), "element record")
        return ElementRecord(
            time=time,
            id=str(node_id),
            selector=str(_pick(obj, ("selector",), "element record")),
            label=str(_pick(obj, ("label", "nodeLabel"), "element record")),
            snippet=str(_pick(obj, ("snippet",), "element record")),
        )


@dataclass(frozen=True)
class UserTiming:
    name: str
    start_time: float

    @staticmethod
    def from_json(obj: Any) -> "UserTiming":
        obj = _mapping(obj, "user timing")
        name = _pick(obj, ("name",), "user timing")
        start = _pick(obj, ("startTime", "start_time"), "user timing")
        return UserTiming(
            name=str(name),
            start_time=_finite(start, "startTime", "user timing"),
        )


@dataclass(frozen=True)
class DomTimeline:
    records: tuple[ElementRecord, ...]
    timeline: tuple[TimelineEntry, ...]
    origin_event: float | None = None
    user_timings: tuple[UserTiming, ...] = ()

    @staticmethod
    def from_json(obj: Any) -> "DomTimeline":
        obj = _mapping(obj, "DOM timeline artifact")

        def _list(*keys: str) -> list[Any]:
            for key in keys:
                if key in obj:
                    items = obj[key]
                    if not isinstance(items, list):
                        raise InputShapeError(f"'{key}' must be a list")
                    return items
            return []

        origin = obj.get("originEvt", obj.get("origin_event"))
        return DomTimeline(
            records=tuple(
                ElementRecord.from_json(r) for r in _list("timestamps", "records")
            ),
            timeline=tuple(
                TimelineEntry.from_json(e) for e in _list("layoutEvents", "timeline")
            ),
            origin_event=(
                _finite(origin, "originEvt", "DOM timeline artifact")
                if origin is not None
                else None
            ),
            user_timings=tuple(
                UserTiming.from_json(u) for u in _list("userTimings", "user_timings")
            ),
        )


def coerce_timeline(timeline: Any) -> list[TimelineEntry]:
    out: list[TimelineEntry] = []
    for entry in timeline:
        if isinstance(entry, TimelineEntry):
            out.append(entry)
        elif isinstance(entry, Mapping):
            out.append(TimelineEntry.from_json(entry))
        else:
            raise InputShapeError(
                f"timeline entries must be TimelineEntry or objects (got {type(entry).__name__})"
            )
    return out


def coerce_records(records: Any) -> list[ElementRecord]:
    out: list[ElementRecord] = []
    for record in records:
        if isinstance(record, ElementRecord):
            out.append(record)
        elif isinstance(record, Mapping):
            out.append(ElementRecord.from_json(record))
        else:
            raise InputShapeError(
                f"element records must be ElementRecord or objects (got {type(record).__name__})"
            )
    return out
