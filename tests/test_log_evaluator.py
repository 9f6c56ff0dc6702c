from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import pytest

from models.records import ReferenceEnvironment
from services.errors import (
    EmptyInputError,
    EmptyReadingsError,
    InvalidReferenceLineError,
    LogEvaluationError,
    MalformedLineError,
    MalformedReadingError,
    MissingReferenceLineError,
    UnknownSensorTypeError,
)
from services.log_evaluator import LogEvaluator, build_default_evaluator, evaluate_log


class RecordingEvaluator:
    """Stub evaluator that records its calls and returns a fixed verdict."""

    def __init__(self, verdict: str) -> None:
        self.verdict = verdict
        self.calls: List[Tuple[ReferenceEnvironment, List[str]]] = []

    def evaluate(self, reference: ReferenceEnvironment, readings: Sequence[str]) -> str:
        self.calls.append((reference, list(readings)))
        return self.verdict


@pytest.fixture()
def stubs() -> dict[str, RecordingEvaluator]:
    return {
        "thermometer": RecordingEvaluator("precise"),
        "humidity": RecordingEvaluator("keep"),
        "monoxide": RecordingEvaluator("discard"),
    }


@pytest.fixture()
def evaluator(stubs: dict[str, RecordingEvaluator]) -> LogEvaluator:
    return LogEvaluator(
        thermometer=stubs["thermometer"],
        humidity=stubs["humidity"],
        monoxide=stubs["monoxide"],
    )


def test_acceptance_log_produces_expected_verdicts(
    acceptance_log: str, acceptance_results: dict[str, str]
) -> None:
    results = build_default_evaluator().evaluate_log(acceptance_log)

    assert results.to_dict() == acceptance_results


def test_module_level_evaluate_log_uses_default_evaluators(
    acceptance_log: str, acceptance_results: dict[str, str]
) -> None:
    assert evaluate_log(acceptance_log) == acceptance_results


@pytest.mark.parametrize("text", [None, "", "     ", "\n\t\n"])
def test_empty_input_is_rejected(evaluator: LogEvaluator, text: str | None) -> None:
    with pytest.raises(EmptyInputError, match="must not be empty"):
        evaluator.evaluate_log(text)


def test_blank_first_line_is_missing_reference(evaluator: LogEvaluator) -> None:
    with pytest.raises(MissingReferenceLineError):
        evaluator.evaluate_log("\nreference 70.0 45.0 6\n")


def test_invalid_reference_line_is_rejected(evaluator: LogEvaluator) -> None:
    with pytest.raises(InvalidReferenceLineError, match="must represent a room environment"):
        evaluator.evaluate_log("very invalid string")


def test_line_with_wrong_token_count_is_malformed(evaluator: LogEvaluator) -> None:
    text = "reference 70.0 45.0 6\ntoo many spaces in this"

    with pytest.raises(MalformedLineError, match="expected format") as excinfo:
        evaluator.evaluate_log(text)

    assert excinfo.value.line_number == 2
    assert excinfo.value.line == "too many spaces in this"


def test_blank_line_after_reference_is_malformed(evaluator: LogEvaluator) -> None:
    text = "reference 70.0 45.0 6\nthermometer temp-1\n\n2007-04-05T22:00 70.0\n"

    with pytest.raises(MalformedLineError):
        evaluator.evaluate_log(text)


def test_unknown_sentinel_tag_is_rejected(evaluator: LogEvaluator) -> None:
    text = "reference 70.0 45.0 6\nunknown sensor-x\n2007-04-05T22:00 70.0\n"

    with pytest.raises(UnknownSensorTypeError):
        evaluator.evaluate_log(text)


def test_readings_before_first_header_are_skipped(
    evaluator: LogEvaluator, stubs: dict[str, RecordingEvaluator]
) -> None:
    results = evaluator.evaluate_log("reference 70.0 45.0 6\n2007-04-05T22:00 45.0")

    assert len(results) == 0
    assert all(not stub.calls for stub in stubs.values())


def test_thermometer_block_is_dispatched_with_reference_and_readings(
    evaluator: LogEvaluator, stubs: dict[str, RecordingEvaluator]
) -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "thermometer temp-1\n"
        "2007-04-05T22:00 45.0\n"
        "  2007-04-05T22:01\t46.0  \n"
        "2007-04-05T22:02 47.0"
    )

    results = evaluator.evaluate_log(text)

    assert results == {"temp-1": "precise"}
    assert stubs["thermometer"].calls == [
        (
            ReferenceEnvironment(temperature=70.0, humidity=45.0, co_concentration=6),
            [
                "2007-04-05T22:00 45.0",
                "2007-04-05T22:01\t46.0",
                "2007-04-05T22:02 47.0",
            ],
        )
    ]
    assert not stubs["humidity"].calls
    assert not stubs["monoxide"].calls


def test_each_sensor_type_routes_to_its_evaluator(
    evaluator: LogEvaluator, stubs: dict[str, RecordingEvaluator]
) -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "HUMIDITY hum-1\n"
        "t1 44.4\n"
        "Monoxide mon-1\n"
        "t1 5\n"
        "t2 7\n"
        "thermometer temp-1\n"
        "t1 70.0\n"
    )

    results = evaluator.evaluate_log(text)

    assert results == {"hum-1": "keep", "mon-1": "discard", "temp-1": "precise"}
    assert [readings for _, readings in stubs["humidity"].calls] == [["t1 44.4"]]
    assert [readings for _, readings in stubs["monoxide"].calls] == [["t1 5", "t2 7"]]
    assert [readings for _, readings in stubs["thermometer"].calls] == [["t1 70.0"]]


def test_sensor_without_readings_is_dropped(
    evaluator: LogEvaluator, stubs: dict[str, RecordingEvaluator]
) -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "thermometer temp-empty\n"
        "humidity hum-1\n"
        "t1 45.0\n"
        "monoxide mon-empty\n"
    )

    results = evaluator.evaluate_log(text)

    assert results == {"hum-1": "keep"}
    assert not stubs["thermometer"].calls
    assert not stubs["monoxide"].calls


def test_each_block_is_evaluated_once(
    evaluator: LogEvaluator, stubs: dict[str, RecordingEvaluator]
) -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "thermometer temp-1\n"
        "t1 70.0\n"
        "thermometer temp-2\n"
        "t1 71.0\n"
        "t2 72.0\n"
    )

    evaluator.evaluate_log(text)

    assert [readings for _, readings in stubs["thermometer"].calls] == [
        ["t1 70.0"],
        ["t1 71.0", "t2 72.0"],
    ]


def test_repeated_sensor_name_keeps_latest_verdict() -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "humidity shared\n"
        "t1 45.0\n"
        "monoxide mon-1\n"
        "t1 6\n"
        "humidity SHARED\n"
        "t1 48.0\n"
    )

    results = build_default_evaluator().evaluate_log(text)

    assert results.to_dict() == {"shared": "discard", "mon-1": "keep"}
    assert results["Shared"] == "discard"


def test_reading_errors_abort_and_name_the_sensor() -> None:
    text = (
        "reference 70.0 45.0 6\n"
        "humidity hum-1\n"
        "t1 45.0\n"
        "monoxide mon-1\n"
        "t1 lots\n"
    )

    with pytest.raises(MalformedReadingError) as excinfo:
        build_default_evaluator().evaluate_log(text)

    assert excinfo.value.sensor_name == "mon-1"
    assert "mon-1" in str(excinfo.value)


def test_evaluator_errors_share_a_value_error_base() -> None:
    assert issubclass(MalformedLineError, LogEvaluationError)
    assert issubclass(EmptyReadingsError, ValueError)


def test_windows_line_endings_are_accepted(
    acceptance_log: str, acceptance_results: dict[str, str]
) -> None:
    results = build_default_evaluator().evaluate_log(acceptance_log.replace("\n", "\r\n"))

    assert results == acceptance_results


@pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x85", "\u2028"])
def test_unicode_whitespace_inside_a_line_does_not_break_it(separator: str) -> None:
    text = f"reference 70.0 45.0 6\nhumidity hum-1\nt1{separator}45.0\n"

    assert evaluate_log(text) == {"hum-1": "keep"}


def test_old_mac_line_endings_are_accepted() -> None:
    text = "reference 70.0 45.0 6\rmonoxide mon-1\rt1 5\rt2 9\r"

    assert evaluate_log(text) == {"mon-1": "keep"}


def test_summary_is_logged(
    evaluator: LogEvaluator, caplog: pytest.LogCaptureFixture
) -> None:
    text = "reference 70.0 45.0 6\nthermometer temp-1\nt1 70.0\n"

    with caplog.at_level(logging.DEBUG, logger="services.log_evaluator"):
        evaluator.evaluate_log(text)

    verdict_records = [r for r in caplog.records if r.getMessage() == "Evaluated sensor"]
    assert len(verdict_records) == 1
    assert verdict_records[0].sensor_name == "temp-1"
    assert verdict_records[0].verdict == "precise"
    summary = [r for r in caplog.records if r.getMessage() == "Evaluated sensor log"]
    assert summary and summary[0].sensor_count == 1
