from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from shiftlab.model import ElementRecord, coerce_records
from shiftlab.types import Attribution, CausalWindow

logger = logging.getLogger(__name__)

# Third-party ad iframes (AdSense) are inserted with ids of the form aswift_<n>.
AD_IFRAME_MARKER = 'id="aswift_'

ContentFilter = Callable[[str], bool]


def snippet_marker_filter(marker: str) -> ContentFilter:
    def _matches(snippet: str) -> bool:
        return marker in snippet

    return _matches


DEFAULT_CONTENT_FILTER: ContentFilter = snippet_marker_filter(AD_IFRAME_MARKER)


def attribute(
    records: Iterable[ElementRecord | Mapping],
    windows: Iterable[CausalWindow],
    content_filter: ContentFilter = DEFAULT_CONTENT_FILTER,
    *,
    offset_ms: float | None = None,
) -> list[Attribution]:
    """Return the inserted elements implicated in at least one causal window.

    A record qualifies when its time falls strictly inside a window (both
    bounds open) and its snippet passes `content_filter`. Each node id is
    reported once, from its first qualifying record in input order.

    `offset_ms`, when given, is added to every record time before comparing,
    moving element times onto the trace clock. `None` compares raw times.
    """

    items = coerce_records(records)
    spans = list(windows)
    seen: set[str] = set()
    results: list[Attribution] = []

    for record in items:
        if record.id in seen:
            continue
        time = record.time if offset_ms is None else record.time + offset_ms
        if not any(w.start < time < w.end for w in spans):
            continue
        if not content_filter(record.snippet):
            continue
        seen.add(record.id)
        results.append(
            Attribution(
                id=record.id,
                selector=record.selector,
                label=record.label,
                snippet=record.snippet,
            )
        )

    logger.debug(
        "attributed %d of %d element records across %d windows",
        len(results),
        len(items),
        len(spans),
    )
    return results
