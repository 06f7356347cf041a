"""
Pipeline event logging.

Appends optimization pipeline events to pipeline_events.log as JSON Lines
(one JSON object per line) so runs can be streamed, filtered and audited
without parsing the human-readable context logs.

For detailed within-context logging, use boron.utils.logger instead.

Usage:
    from boron.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="stage_failed",
        run_id="3f2c...",
        source="targeting",
        stage="skills",
        error="Stage timed out after 60s",
    )
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from boron.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
PIPELINE_EVENTS_FILE = Path(
    os.getenv("PIPELINE_EVENTS_FILE", str(LOGS_PATH / "pipeline_events.log"))
)


def log_pipeline_event(event_type: str, run_id: str, source: str, **extra_fields) -> None:
    """
    Log an event to the pipeline event log.

    Args:
        event_type: Type of event (e.g., "pipeline_started", "stage_succeeded")
        run_id: Pipeline run identifier
        source: Event source (e.g., "targeting", "cli")
        **extra_fields: Additional event-specific fields (must be JSON serializable)
    """
    PIPELINE_EVENTS_FILE.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "run_id": run_id,
        "source": source,
        **extra_fields,
    }

    with open(PIPELINE_EVENTS_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(event, default=str) + "\n")


def read_pipeline_events(
    run_id: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> List[Dict]:
    """
    Read events back from the log, optionally filtered by run or event type.

    Malformed lines are skipped.
    """
    events_file = events_file or PIPELINE_EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if run_id is not None and event.get("run_id") != run_id:
                continue
            if event_type is not None and event.get("event_type") != event_type:
                continue
            events.append(event)

    return events


def get_recent_events(count: int = 10, events_file: Optional[Path] = None) -> List[Dict]:
    """Return the most recent events, newest last."""
    events = read_pipeline_events(events_file=events_file)
    return events[-count:] if count else events
