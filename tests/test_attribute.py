from __future__ import annotations

import pytest

from shiftlab.attribute import (
    AD_IFRAME_MARKER,
    DEFAULT_CONTENT_FILTER,
    attribute,
    snippet_marker_filter,
)
from shiftlab.detect import detect
from shiftlab.model import ElementRecord, TimelineEntry
from shiftlab.types import Attribution, CausalWindow
from shiftlab.validate import InputShapeError

AD_SNIPPET = '<iframe id="aswift_1" name="aswift_1">'


def _rec(time: float, node_id: str, snippet: str = AD_SNIPPET) -> ElementRecord:
    return ElementRecord(
        time=time, id=node_id, selector=f"#{node_id}", label="ad", snippet=snippet
    )


def _attr(node_id: str, snippet: str = AD_SNIPPET) -> Attribution:
    return Attribution(id=node_id, selector=f"#{node_id}", label="ad", snippet=snippet)


WINDOW = CausalWindow(start=0.0, end=15.0)


def test_scenario_record_inside_window_is_attributed() -> None:
    timeline = [
        TimelineEntry("ScheduleStyleRecalculation", 0.0, 0.0),
        TimelineEntry("UpdateLayerTree", 5.0, 10.0),
        TimelineEntry("LayoutShift", 8.0, 0.0),
    ]
    windows = detect(timeline)
    got = attribute([_rec(7.0, "a"), _rec(20.0, "b")], windows)
    assert got == [_attr("a")]


def test_window_bounds_are_open() -> None:
    assert attribute([_rec(0.0, "start")], [WINDOW]) == []
    assert attribute([_rec(15.0, "end")], [WINDOW]) == []
    assert attribute([_rec(14.999, "in")], [WINDOW]) == [_attr("in")]


def test_record_failing_content_filter_is_excluded() -> None:
    assert attribute([_rec(7.0, "a", snippet="<div class='hero'>")], [WINDOW]) == []


def test_duplicate_windows_attribute_once() -> None:
    assert attribute([_rec(7.0, "a")], [WINDOW, WINDOW]) == [_attr("a")]


def test_same_id_keeps_first_qualifying_occurrence() -> None:
    first = ElementRecord(time=3.0, id="a", selector="#first", label="x", snippet=AD_SNIPPET)
    later = ElementRecord(time=30.0, id="a", selector="#later", label="y", snippet=AD_SNIPPET)
    windows = [WINDOW, CausalWindow(start=25.0, end=40.0)]
    got = attribute([first, later], windows)
    assert got == [Attribution(id="a", selector="#first", label="x", snippet=AD_SNIPPET)]


def test_non_qualifying_first_occurrence_does_not_block_later_one() -> None:
    outside = _rec(50.0, "a")
    filtered = _rec(5.0, "a", snippet="<span>")
    inside = ElementRecord(time=7.0, id="a", selector="#late", label="ad", snippet=AD_SNIPPET)
    got = attribute([outside, filtered, inside], [WINDOW])
    assert got == [Attribution(id="a", selector="#late", label="ad", snippet=AD_SNIPPET)]


def test_output_preserves_record_order() -> None:
    records = [_rec(9.0, "c"), _rec(2.0, "a"), _rec(5.0, "b")]
    assert [a.id for a in attribute(records, [WINDOW])] == ["c", "a", "b"]


def test_empty_inputs() -> None:
    assert detect([]) == []
    assert attribute([], []) == []
    assert attribute([_rec(7.0, "a")], []) == []


def test_custom_content_filter() -> None:
    records = [_rec(7.0, "a", snippet="<img data-ad>"), _rec(8.0, "b")]
    got = attribute(records, [WINDOW], lambda s: "data-ad" in s)
    assert [a.id for a in got] == ["a"]


def test_marker_filter_factory() -> None:
    f = snippet_marker_filter("needle")
    assert f("hay needle hay")
    assert not f("hay")
    assert DEFAULT_CONTENT_FILTER(f"<iframe {AD_IFRAME_MARKER}9\">")


def test_offset_is_applied_to_record_times_when_given() -> None:
    records = [_rec(20.0, "a")]
    assert attribute(records, [WINDOW]) == []
    assert attribute(records, [WINDOW], offset_ms=-13.0) == [_attr("a")]


def test_raw_mapping_records_with_devtools_aliases() -> None:
    raw = {
        "time": 7,
        "devtoolsNodePath": "1,HTML,1,BODY,0,IFRAME",
        "selector": "body > iframe",
        "nodeLabel": "ad frame",
        "snippet": AD_SNIPPET,
    }
    assert attribute([raw], [WINDOW]) == [
        Attribution(
            id="1,HTML,1,BODY,0,IFRAME",
            selector="body > iframe",
            label="ad frame",
            snippet=AD_SNIPPET,
        )
    ]


def test_record_missing_id_fails_fast() -> None:
    with pytest.raises(InputShapeError, match="'id'"):
        attribute([{"time": 7, "snippet": AD_SNIPPET}], [WINDOW])
