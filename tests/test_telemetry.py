from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import pytest

from modal_engine import EditorSession
from modal_engine.runtime import telemetry
from modal_engine.runtime.tracing import RecordingTraceSink


@pytest.fixture(autouse=True)
def reset_telemetry() -> Iterator[None]:
    yield
    telemetry.configure()


def configure_json(path: Path, *, min_level: str = "DEBUG") -> None:
    telemetry.configure(
        config=telemetry.TelemetryConfig(
            min_level=min_level,
            console=False,
            colors=False,
            json=True,
            log_file=str(path),
        )
    )


def read_lines(path: Path) -> list[dict[str, Any]]:
    return [json.loads(line) for line in path.read_text().splitlines() if line]


def test_record_event_writes_structured_line(tmp_path: Path) -> None:
    log_file = tmp_path / "events.log"
    configure_json(log_file)

    telemetry.record_event(
        "unit.test", data={"count": 3, "event": "x"}, logger_name="tests"
    )

    (line,) = read_lines(log_file)
    assert line["event"] == "event::unit.test"
    assert line["count"] == "3"
    assert line["event_data"] == "x"
    assert line["logger"] == "tests"
    assert line["level"] == "info"


def test_min_level_filters_debug(tmp_path: Path) -> None:
    log_file = tmp_path / "events.log"
    configure_json(log_file, min_level="INFO")

    telemetry.record_event("quiet", level="debug")
    telemetry.record_event("loud", level="warning")

    assert [line["event"] for line in read_lines(log_file)] == ["event::loud"]


def test_span_binds_context_and_reports_duration(tmp_path: Path) -> None:
    log_file = tmp_path / "span.log"
    configure_json(log_file)

    with telemetry.span("unit::span", component=True, metadata={"k": 1}) as handle:
        telemetry.get_logger("tests").info("inside")
        handle.add_metadata("status", "ok")

    inside, end = read_lines(log_file)
    assert inside["span"] == "unit::span"
    assert inside["component"] == "unit::span"
    assert inside["k"] == "1"
    assert end["event"] == "span::end"
    assert end["status"] == "ok"
    assert handle.duration_ms is not None
    assert end["duration_ms"] == handle.duration_ms


def test_span_failure_is_logged_and_reraised(tmp_path: Path) -> None:
    log_file = tmp_path / "span.log"
    configure_json(log_file)

    with pytest.raises(RuntimeError):
        with telemetry.span("unit::boom"):
            raise RuntimeError("boom")

    events = [(line["event"], line.get("reason")) for line in read_lines(log_file)]
    assert events == [("span::fail", "boom"), ("span::end", None)]


def test_configure_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=telemetry.TelemetryConfig(), preset="development")
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")
    with pytest.raises(ValueError):
        telemetry.record_event("x", level="verbose")


def test_development_preset_enables_debug() -> None:
    telemetry.configure(preset="development")

    config = telemetry.active_config()
    assert config.min_level == "DEBUG"
    assert config.console


def test_session_traces_through_telemetry_by_default(tmp_path: Path) -> None:
    log_file = tmp_path / "session.log"
    configure_json(log_file)
    session = EditorSession()

    session.press("a", text="a")

    lines = read_lines(log_file)
    suppressed = [line for line in lines if line["event"] == "event::event.suppressed"]
    assert [line["reason"] for line in suppressed] == ["inserted"]
    assert suppressed[0]["logger"] == "modal_engine.trace"
    spans = [line for line in lines if line.get("span") == "translate::key"]
    assert spans[-1]["event"] == "span::end"
    assert spans[-1]["status"] == "unmatched"


def test_recording_sink_keeps_latest_records() -> None:
    sink = RecordingTraceSink(limit=2)

    for index in range(3):
        sink.record("tick", {"index": index})
    sink.record("tock", {})

    assert sink.events("tick") == [{"index": 2}]
    assert len(sink.records) == 2
    sink.clear()
    assert sink.events() == []
