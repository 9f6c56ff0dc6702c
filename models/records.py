"""Domain models shared across services."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from models.tokens import parse_integer, parse_real, split_fields

REFERENCE_TAG = "reference"


class SensorType(str, Enum):
    """Sensor kinds that may appear as block headers in a log."""

    unknown = "unknown"
    thermometer = "thermometer"
    humidity = "humidity"
    monoxide = "monoxide"

    @classmethod
    def from_tag(cls, tag: str) -> Optional["SensorType"]:
        """Resolve a header tag case-insensitively.

        Returns ``None`` for anything that is not a sensor type name. The
        ``unknown`` sentinel is returned as-is so the caller can reject it.
        """

        try:
            return cls(tag.lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ReferenceEnvironment:
    """The stable environment a room was held at while the log was recorded."""

    temperature: float
    humidity: float
    co_concentration: int


def parse_reference(line: str) -> Optional[ReferenceEnvironment]:
    """Parse ``reference <temperature> <humidity> <co ppm>``.

    Returns ``None`` when the line does not describe a reference environment.
    """

    if not line or not line.strip():
        return None

    parts = split_fields(line)
    if len(parts) != 4:
        return None

    if parts[0].lower() != REFERENCE_TAG:
        return None

    temperature = parse_real(parts[1])
    if temperature is None:
        return None

    humidity = parse_real(parts[2])
    if humidity is None or humidity < 0 or humidity > 100:
        return None

    co_concentration = parse_integer(parts[3])
    if co_concentration is None:
        return None

    return ReferenceEnvironment(
        temperature=temperature,
        humidity=humidity,
        co_concentration=co_concentration,
    )


@dataclass(slots=True)
class SensorBlock:
    """Readings collected for one sensor between its header and the next one."""

    name: str
    sensor_type: SensorType
    readings: List[str] = field(default_factory=list)

    def add_reading(self, line: str) -> None:
        self.readings.append(line)

    @property
    def has_readings(self) -> bool:
        return bool(self.readings)


class ResultMap(MutableMapping):
    """Sensor name to verdict mapping with case-insensitive keys.

    Re-assigning an existing name replaces the verdict but keeps the spelling
    under which the sensor was first recorded.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, Tuple[str, str]] = {}
        if initial:
            self.update(initial)

    def __setitem__(self, name: str, verdict: str) -> None:
        key = name.casefold()
        existing = self._items.get(key)
        display = existing[0] if existing is not None else name
        self._items[key] = (display, verdict)

    def __getitem__(self, name: str) -> str:
        try:
            return self._items[name.casefold()][1]
        except KeyError:
            raise KeyError(name) from None

    def __delitem__(self, name: str) -> None:
        try:
            del self._items[name.casefold()]
        except KeyError:
            raise KeyError(name) from None

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, str]:
        return {display: verdict for display, verdict in self._items.values()}
