"""Headless core for attributing layout shifts to injected DOM elements.

The engine correlates an ordered rendering-event trace with an ordered
element-insertion log:

- `shiftlab.detect` derives causal windows from the trace.
- `shiftlab.attribute` matches element records against those windows.
- `shiftlab.align` estimates the offset between the two clocks.

Run from source:

    python -m shiftlab attribute --artifact dom_timeline.json
"""

from __future__ import annotations

from shiftlab.attribute import attribute
from shiftlab.detect import detect

__all__ = ["__version__", "attribute", "detect"]

__version__ = "0.1.0"
