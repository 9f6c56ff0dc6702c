"""Scanning of a sensor log into per-sensor blocks and dispatch to evaluators."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional

from models.records import (
    ReferenceEnvironment,
    ResultMap,
    SensorBlock,
    SensorType,
    parse_reference,
)
from models.tokens import split_fields, split_lines
from services.errors import (
    EmptyInputError,
    InvalidReferenceLineError,
    LogEvaluationError,
    MalformedLineError,
    MissingReferenceLineError,
    UnknownSensorTypeError,
)
from services.evaluators import (
    CarbonMonoxideDetectorEvaluator,
    HumiditySensorEvaluator,
    SensorEvaluator,
    ThermometerEvaluator,
)

logger = logging.getLogger(__name__)


class LogEvaluator:
    """Evaluates every sensor recorded in a log against its reference environment.

    The evaluator for each sensor type is supplied by the caller, which keeps the
    scanner free of global state and lets tests substitute stubs.
    """

    def __init__(
        self,
        thermometer: SensorEvaluator,
        humidity: SensorEvaluator,
        monoxide: SensorEvaluator,
    ) -> None:
        self._evaluators: Dict[SensorType, SensorEvaluator] = {
            SensorType.thermometer: thermometer,
            SensorType.humidity: humidity,
            SensorType.monoxide: monoxide,
        }

    def evaluate_log(self, text: Optional[str]) -> ResultMap:
        """Return the verdict for each sensor named in ``text``."""
        if text is None or not text.strip():
            raise EmptyInputError("Log file must not be empty.")

        lines = split_lines(text)
        first_line = lines[0] if lines else ""
        if not first_line.strip():
            raise MissingReferenceLineError("Log file must contain a first line.")

        reference = parse_reference(first_line)
        if reference is None:
            raise InvalidReferenceLineError(
                "Log file first line must represent a room environment "
                f"('reference <temperature> <humidity> <co ppm>'). Line: {first_line.strip()!r}"
            )

        results = ResultMap()
        block: Optional[SensorBlock] = None

        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            parts = split_fields(line)
            if len(parts) != 2:
                raise MalformedLineError(
                    f"Line {line_number} did not have the expected format "
                    f"'<label> <value>'. Line: {line!r}",
                    line_number=line_number,
                    line=line,
                )

            sensor_type = SensorType.from_tag(parts[0])
            if sensor_type is None:
                if block is None:
                    logger.debug(
                        "Skipping reading outside any sensor block",
                        extra={"line_number": line_number},
                    )
                    continue
                block.add_reading(line)
                continue

            if sensor_type is SensorType.unknown:
                raise UnknownSensorTypeError(
                    f"Sensor type on line {line_number} should not be unknown."
                )

            if block is not None:
                self._finalize(block, reference, results)
            block = SensorBlock(name=parts[1], sensor_type=sensor_type)

        if block is not None:
            self._finalize(block, reference, results)

        logger.info(
            "Evaluated sensor log",
            extra={"sensor_count": len(results)},
        )
        return results

    def _finalize(
        self,
        block: SensorBlock,
        reference: ReferenceEnvironment,
        results: ResultMap,
    ) -> None:
        if not block.has_readings:
            logger.debug(
                "Dropping sensor without readings",
                extra={"sensor_name": block.name, "sensor_type": block.sensor_type.value},
            )
            return

        verdict = self._evaluate_block(block, reference)
        if block.name in results:
            logger.debug(
                "Overwriting earlier verdict for repeated sensor name",
                extra={"sensor_name": block.name},
            )
        results[block.name] = verdict
        logger.debug(
            "Evaluated sensor",
            extra={
                "sensor_name": block.name,
                "sensor_type": block.sensor_type.value,
                "reading_count": len(block.readings),
                "verdict": verdict,
            },
        )

    def _evaluate_block(self, block: SensorBlock, reference: ReferenceEnvironment) -> str:
        evaluator = self._evaluators.get(block.sensor_type)
        if evaluator is None:
            raise UnknownSensorTypeError(
                f"Invalid sensor type {block.sensor_type.value!r}.",
                sensor_name=block.name,
            )
        try:
            return evaluator.evaluate(reference, list(block.readings))
        except LogEvaluationError as exc:
            if exc.sensor_name is None:
                exc.sensor_name = block.name
            raise


def evaluate_log(text: Optional[str]) -> ResultMap:
    """Evaluate ``text`` with the default evaluators."""
    return build_default_evaluator().evaluate_log(text)


@lru_cache
def build_default_evaluator() -> LogEvaluator:
    """Factory that wires the scanner with the standard sensor evaluators."""
    return LogEvaluator(
        thermometer=ThermometerEvaluator(),
        humidity=HumiditySensorEvaluator(),
        monoxide=CarbonMonoxideDetectorEvaluator(),
    )
