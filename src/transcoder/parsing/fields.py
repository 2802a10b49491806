"""Declarative field extractors for FFmpeg stream and progress lines.

Each registry is an ordered tuple of :class:`FieldSpec` records. A spec is
applied on its own: a missing match, a falsy value or a failing transform
drops that single field and never affects the others. Zero counts as falsy,
so a field that is legitimately ``0`` is omitted from the result.
"""

import logging
import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class FieldSpec(BaseModel):
    """Extraction rule for one named field."""

    model_config = {"frozen": True}

    name: str
    pattern: re.Pattern
    group: int | None = None
    transform: Callable[[Any], Any] | None = None

    def extract(self, line: str) -> Any:
        """Return the extracted value, or None when the line has none."""
        match = self.pattern.search(line)
        if match is None:
            return None
        raw = match if self.group is None else match.group(self.group)
        return self.transform(raw) if self.transform else raw


def apply_fields(line: str, registry: tuple[FieldSpec, ...]) -> dict[str, Any]:
    """Apply every spec of a registry to a line."""
    result = {}
    for spec in registry:
        try:
            value = spec.extract(line)
        except Exception as e:
            logger.debug("Field %r failed on %r: %s", spec.name, line, e)
            continue
        if value:
            result[spec.name] = value
    return result


# --- Transforms ---

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(text: str | None) -> int | None:
    """Truncating integer parse: ``"29.97"`` gives 29, garbage gives None."""
    if text is None:
        return None
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_channels(text: str) -> int | None:
    if text == "mono":
        return 1
    if text == "stereo":
        return 2
    return parse_int(text)


def parse_duration(value: str) -> int:
    """Convert ``HH:MM:SS.frac`` to milliseconds."""
    hours, minutes, seconds, fraction = re.split(r"[:.]", value)
    millis = int(fraction[:3].ljust(3, "0")) if fraction else 0
    return int(hours) * 3_600_000 + int(minutes) * 60_000 + int(seconds) * 1000 + millis


def _scaled(match: re.Match, base: int) -> int | None:
    """Scale group 1 by the unit prefix in group 2 (``k`` or ``m``)."""
    value = parse_int(match.group(1))
    if value is None:
        return None
    unit = match.group(2)
    if unit == "k":
        return value * base
    if unit == "m":
        return value * base * base
    return value


def decimal_units(match: re.Match) -> int | None:
    return _scaled(match, 1000)


def binary_units(match: re.Match) -> int | None:
    return _scaled(match, 1024)


def _frame_size(match: re.Match) -> dict[str, int] | None:
    if match.group(1) and match.group(2):
        return {"width": int(match.group(1)), "height": int(match.group(2))}
    return None


def _aspect_ratio(match: re.Match) -> float | None:
    if match.group(1) and match.group(2):
        return int(match.group(1)) / int(match.group(2))
    return None


def _field(name: str, pattern: str, group: int | None = None, transform=None) -> FieldSpec:
    return FieldSpec(
        name=name,
        pattern=re.compile(pattern, re.IGNORECASE),
        group=group,
        transform=transform,
    )


# --- Registries ---

METADATA_FIELDS: tuple[FieldSpec, ...] = (
    _field("type", r"Stream #[0-9]+:[0-9]+.*?: (\w+):", 1, str.lower),
    _field("codec", r"Stream.*?:.*?: \w+: (.*?)(?: |\()", 1),
    _field("sample_rate", r"(\d+) Hz", 1, parse_int),
    _field("channels", r"\d+ Hz, (.*?)(?:,|$)", 1, parse_channels),
    _field("bitrate", r"(\d+) (\w)?b/s", transform=decimal_units),
    # NTSC rates such as "29.97 fps" truncate to 29
    _field("fps", r"(\d+)(?:\.\d+)? fps", 1, parse_int),
    _field("size", r"(\d+)x(\d+)(?:,|$)", transform=_frame_size),
    _field("aspect_ratio", r"(\d+)x(\d+)(?:,|$)", transform=_aspect_ratio),
    _field("colors", r"Video:.*?, (.*?)(?:,|$)", 1),
)

PROGRESS_FIELDS: tuple[FieldSpec, ...] = (
    _field("frame", r"frame=\s*(\d+)", 1, parse_int),
    _field("fps", r"fps=\s*([\d.]+)", 1, parse_int),
    _field("quality", r"q=\s*([\d.]+)", 1, parse_int),
    # Output size uses binary prefixes, unlike the bitrates
    _field("size", r"size=\s*(\d+)(\w)?b", transform=binary_units),
    _field("time", r"time=(\d+:\d+:\d+.\d+)", 1, parse_duration),
    _field("bitrate", r"bitrate=\s*([\d.]+)(\w)?bits/s", transform=decimal_units),
)

DURATION_PATTERN = re.compile(r"duration: (\d+:\d+:\d+.\d+)", re.IGNORECASE)
