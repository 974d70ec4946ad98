from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shiftlab.model import DomTimeline
from shiftlab.validate import InputShapeError


def load_dom_timeline(path: Path) -> DomTimeline:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputShapeError(f"{path}: not valid JSON ({e})") from e
    return DomTimeline.from_json(raw)


def format_summary_json(summary: dict[str, Any]) -> str:
    return json.dumps(summary, indent=2, sort_keys=True)
