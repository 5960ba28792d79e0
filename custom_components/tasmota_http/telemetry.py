"""Parser for the sensor table served by the Tasmota web UI (``/?m=1``).

The page is a compact template language rather than HTML: every row is
``{s}<name>{m}<value and unit>{e}``.  Recent firmware wraps the value and the
unit in extra ``<td>`` cells, so markup and entities are stripped before the
numeric part is split from the unit symbol.
"""

from __future__ import annotations

import html
import re

from .const import DATA_TEMPERATURE_MARKER
from .models import PollSample, TelemetryValue

_ROW_RE = re.compile(r"\{s\}(.*?)\{m\}(.*?)\{e\}", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_VALUE_RE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*(.*)$")


def _clean(raw: str) -> str:
    text = html.unescape(_TAG_RE.sub(" ", raw)).replace("\xa0", " ")
    return " ".join(text.split())


def parse_telemetry(text: str) -> PollSample:
    """Return a mapping of telemetry name to value and unit.

    Rows whose value is not numeric (e.g. "ON", timestamps) are skipped.
    When a name repeats, the first row wins.
    """
    sample: PollSample = {}

    for raw_name, raw_value in _ROW_RE.findall(text):
        name = _clean(raw_name)
        match = _VALUE_RE.match(_clean(raw_value))
        if not name or match is None or name in sample:
            continue
        sample[name] = TelemetryValue(
            value=float(match.group(1)), unit=match.group(2)
        )

    return sample


def find_temperature_key(sample: PollSample) -> str | None:
    """Name of the first temperature row, e.g. ``"AM2301 Temperature"``."""
    return next(
        (name for name in sample if DATA_TEMPERATURE_MARKER in name), None
    )
