"""Errors raised while evaluating a sensor log."""

from __future__ import annotations

from typing import Optional


class LogEvaluationError(ValueError):
    """Base class for every failure that aborts a log evaluation."""

    reason = "invalid log"

    def __init__(self, message: str, *, sensor_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.sensor_name = sensor_name

    def __str__(self) -> str:
        if self.sensor_name:
            return f"Sensor {self.sensor_name!r}: {self.message}"
        return self.message


class EmptyInputError(LogEvaluationError):
    reason = "empty input"


class MissingReferenceLineError(LogEvaluationError):
    reason = "missing reference line"


class InvalidReferenceLineError(LogEvaluationError):
    reason = "invalid reference line"


class MalformedLineError(LogEvaluationError):
    """A line after the reference line did not split into exactly two fields."""

    reason = "malformed line"

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class UnknownSensorTypeError(LogEvaluationError):
    reason = "unknown sensor type"


class EmptyReadingsError(LogEvaluationError):
    reason = "no readings"


class MalformedReadingError(LogEvaluationError):
    reason = "malformed reading"
