"""Per-sensor-type classification of raw reading lines."""

from __future__ import annotations

import math
from typing import Protocol, Sequence, Tuple

from models.records import ReferenceEnvironment
from models.tokens import parse_integer, parse_real, split_fields
from services.errors import EmptyReadingsError, MalformedReadingError

KEEP = "keep"
DISCARD = "discard"

ULTRA_PRECISE = "ultra precise"
VERY_PRECISE = "very precise"
PRECISE = "precise"


class SensorEvaluator(Protocol):
    """Classifies one sensor from its readings against the reference environment."""

    def evaluate(self, reference: ReferenceEnvironment, readings: Sequence[str]) -> str:
        ...


def _require_readings(readings: Sequence[str]) -> None:
    if not readings:
        raise EmptyReadingsError("There should be at least one reading.")


def _value_token(reading: str) -> str:
    # The first field is a timestamp in no particular format and is never used.
    parts = split_fields(reading)
    if len(parts) != 2:
        raise MalformedReadingError(
            f"Reading {reading!r} does not have the expected 2 parts separated by whitespace."
        )
    return parts[1]


def mean_and_standard_deviation(values: Sequence[float]) -> Tuple[float, float]:
    """Return the mean and sample standard deviation of ``values``.

    The deviation uses the running sum / sum-of-squares form. A single value has
    a deviation of exactly 0.
    """

    count = len(values)
    if count == 0:
        raise ValueError("Cannot compute statistics of an empty sequence.")

    total = 0.0
    total_squares = 0.0
    for value in values:
        total += value
        total_squares += value * value

    mean = total / count
    if count == 1:
        return mean, 0.0

    variance = (total_squares - (total * total) / count) * (1.0 / (count - 1))
    # Rounding can push the variance of near-identical values just below zero.
    return mean, math.sqrt(max(variance, 0.0))


class ThermometerEvaluator:
    """Grades thermometers by how close and how steady their readings are."""

    ultra_precise_mean_tolerance = 0.5
    ultra_precise_std_ceiling = 3.0
    very_precise_mean_tolerance = 0.5
    very_precise_std_ceiling = 5.0

    def evaluate(self, reference: ReferenceEnvironment, readings: Sequence[str]) -> str:
        _require_readings(readings)

        values = []
        for reading in readings:
            token = _value_token(reading)
            temperature = parse_real(token)
            if temperature is None:
                raise MalformedReadingError(
                    f"Read temperature {token!r} should be a decimal value."
                )
            values.append(temperature)

        mean, std_deviation = mean_and_standard_deviation(values)
        mean_inaccuracy = abs(reference.temperature - mean)

        if (
            mean_inaccuracy <= self.ultra_precise_mean_tolerance
            and std_deviation < self.ultra_precise_std_ceiling
        ):
            return ULTRA_PRECISE
        if (
            mean_inaccuracy <= self.very_precise_mean_tolerance
            and std_deviation < self.very_precise_std_ceiling
        ):
            return VERY_PRECISE
        return PRECISE


class HumiditySensorEvaluator:
    """Keeps a humidity sensor only if every reading is within tolerance."""

    tolerance = 1.0

    def evaluate(self, reference: ReferenceEnvironment, readings: Sequence[str]) -> str:
        _require_readings(readings)

        for reading in readings:
            token = _value_token(reading)
            humidity = parse_real(token)
            if humidity is None or humidity < 0 or humidity > 100:
                raise MalformedReadingError(
                    f"Read humidity {token!r} must be a percentage."
                )
            if abs(reference.humidity - humidity) > self.tolerance:
                return DISCARD
        return KEEP


class CarbonMonoxideDetectorEvaluator:
    """Keeps a CO detector only if every reading is within tolerance (ppm)."""

    tolerance = 3

    def evaluate(self, reference: ReferenceEnvironment, readings: Sequence[str]) -> str:
        _require_readings(readings)

        for reading in readings:
            token = _value_token(reading)
            ppm = parse_integer(token)
            if ppm is None:
                raise MalformedReadingError(f"Read ppm {token!r} must be an integer.")
            if abs(reference.co_concentration - ppm) > self.tolerance:
                return DISCARD
        return KEEP
