"""Unit tests for the JSON Lines pipeline event log."""

import json

import pytest

from boron.utils.event_logging import get_recent_events, log_pipeline_event, read_pipeline_events


@pytest.mark.unit
def test_events_are_json_lines(isolated_event_log):
    log_pipeline_event("stage_failed", "run-1", "targeting", stage="skills", error="timeout")

    lines = isolated_event_log.read_text().splitlines()
    event = json.loads(lines[0])
    assert event["event_type"] == "stage_failed"
    assert event["run_id"] == "run-1"
    assert event["stage"] == "skills"
    assert "timestamp" in event


@pytest.mark.unit
def test_read_filters_and_skips_bad_lines(isolated_event_log):
    log_pipeline_event("pipeline_started", "run-1", "targeting")
    log_pipeline_event("pipeline_started", "run-2", "targeting")
    with open(isolated_event_log, "a") as f:
        f.write("not json\n\n")
    log_pipeline_event("pipeline_finished", "run-1", "targeting", state="done")

    assert len(read_pipeline_events()) == 3
    assert [e["event_type"] for e in read_pipeline_events(run_id="run-1")] == [
        "pipeline_started",
        "pipeline_finished",
    ]
    assert len(read_pipeline_events(event_type="pipeline_started")) == 2
    assert get_recent_events(1)[0]["state"] == "done"


@pytest.mark.unit
def test_missing_file(tmp_path):
    assert read_pipeline_events(events_file=tmp_path / "none.log") == []
