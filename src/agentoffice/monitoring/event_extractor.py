"""Extraction of lane lifecycle events from raw gateway log content.

The gateway writes either plain text lines or JSON envelopes produced by its
``logToFile`` forwarder, where the message text sits under key ``"1"``. Both
shapes are accepted; everything that doesn't look like a lane event is noise
and is dropped without complaint.
"""

from __future__ import annotations

import json
import re

from .models import EventKind, LaneEvent

CRON_AGENT_ID = "cron"

_ENQUEUE_PATTERN = re.compile(r"lane enqueue: lane=session:agent:([\w-]+)(?::(\w+))?")
_TASK_DONE_PATTERN = re.compile(r"lane task done: lane=session:agent:([\w-]+)(?::(\w+))?")
_CRON_ENQUEUE_MARKER = "lane enqueue: lane=cron"
_CRON_SUFFIX_PATTERN = re.compile(r"-cron.*$")


def normalize_agent_id(token: str) -> str:
    """Strip a trailing ``-cron...`` suffix, e.g. ``zero-cron-abc123`` -> ``zero``."""
    return _CRON_SUFFIX_PATTERN.sub("", token)


def unwrap_envelope(line: str) -> str:
    """Return the message carried by a ``logToFile`` envelope, or the line itself.

    Args:
        line: One raw log line.

    Returns:
        The nested message string when ``line`` is a forwarded log call,
        otherwise ``line`` unchanged.
    """
    if not line.startswith("{"):
        return line

    try:
        entry = json.loads(line)
    except (ValueError, RecursionError):
        return line

    if not isinstance(entry, dict):
        return line

    meta = entry.get("_meta")
    path = meta.get("path") if isinstance(meta, dict) else None
    method = path.get("method") if isinstance(path, dict) else None
    message = entry.get("1")

    if method == "logToFile" and isinstance(message, str):
        return message
    return line


def classify_line(message: str) -> LaneEvent | None:
    """Match one message against the known lane event shapes.

    First match wins, so a line yields at most one event.

    Args:
        message: Plain message text.

    Returns:
        The recognised event, or None for unrelated lines.
    """
    match = _ENQUEUE_PATTERN.search(message)
    if match:
        return LaneEvent(EventKind.ENQUEUE, normalize_agent_id(match.group(1)), match.group(2))

    match = _TASK_DONE_PATTERN.search(message)
    if match:
        return LaneEvent(EventKind.TASK_DONE, normalize_agent_id(match.group(1)), match.group(2))

    if _CRON_ENQUEUE_MARKER in message:
        return LaneEvent(EventKind.ENQUEUE, CRON_AGENT_ID)

    return None


def extract_events(chunk: bytes | str) -> list[LaneEvent]:
    """Extract lane events from a chunk of log content, in log order.

    Args:
        chunk: Raw bytes from the tail reader, or already decoded text.

    Returns:
        One event per recognised line.
    """
    if isinstance(chunk, bytes):
        chunk = chunk.decode("utf-8", errors="replace")

    events: list[LaneEvent] = []
    for line in chunk.split("\n"):
        line = line.strip()
        if not line:
            continue

        event = classify_line(unwrap_envelope(line))
        if event is not None:
            events.append(event)

    return events
