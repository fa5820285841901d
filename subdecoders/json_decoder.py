from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from limesub.logging_helper import log_skipped
from limesub.utils import normalize_newlines

from .base import FormatError, SubtitleDecoder, TimedTextBlock

# Ordered aliases per logical field; the first key present in an event wins,
# even when its value is empty.
START_KEYS: Tuple[str, ...] = ("tStartMs", "start")
DURATION_KEYS: Tuple[str, ...] = ("dDurationMs", "duration")
SEGMENT_TEXT_KEYS: Tuple[str, ...] = ("utf8", "text")
EVENT_TEXT_KEY = "text"
SEGMENTS_KEY = "segs"


def resolve_alias(obj: Dict[str, Any], keys: Sequence[str]) -> Tuple[Optional[str], Any]:
    """Return (key, value) for the first alias present in obj, else (None, None)."""
    for key in keys:
        if key in obj:
            return key, obj[key]
    return None, None


def as_int(value: Any) -> int:
    """Lenient integer coercion: numbers truncate, integer strings parse, the rest is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class JsonEventsDecoder(SubtitleDecoder):
    """Caption-event JSON decoder (YouTube timedtext `json3` and look-alikes).

    Accepts `{"events": [...]}` or a bare top-level array of events.
    """

    def name(self) -> str:
        return "json"

    def _event_text(self, event: Dict[str, Any]) -> str:
        segs = event.get(SEGMENTS_KEY)
        if isinstance(segs, list):
            parts: List[str] = []
            for seg in segs:
                if isinstance(seg, dict):
                    _, value = resolve_alias(seg, SEGMENT_TEXT_KEYS)
                    parts.append(_stringify(value))
                else:
                    parts.append(_stringify(seg))
            return "".join(parts)
        if EVENT_TEXT_KEY in event:
            return _stringify(event[EVENT_TEXT_KEY])
        return ""

    def _extract_events(self, content: str) -> List[Any]:
        try:
            root = json.loads(content)
        except json.JSONDecodeError as e:
            raise FormatError(f"Invalid JSON: {e}") from e
        if isinstance(root, list):
            return root
        if not isinstance(root, dict):
            raise FormatError("JSON root must be an object with 'events' or an array of events")
        if "events" not in root:
            raise FormatError("No events array found in JSON")
        events = root["events"]
        if not isinstance(events, list):
            raise FormatError("JSON 'events' is not an array")
        return events

    def decode_text(self, content: str) -> List[TimedTextBlock]:
        events = self._extract_events(content)
        blocks: List[TimedTextBlock] = []
        skipped = 0
        for i, event in enumerate(events, 1):
            if not isinstance(event, dict):
                skipped += 1
                continue
            _, start_raw = resolve_alias(event, START_KEYS)
            _, duration_raw = resolve_alias(event, DURATION_KEYS)
            start_ms = as_int(start_raw)
            duration_ms = as_int(duration_raw) or self.default_duration_ms
            blocks.append(
                TimedTextBlock(
                    start_ms=start_ms,
                    end_ms=start_ms + duration_ms,
                    text=normalize_newlines(self._event_text(event)).strip(),
                    index=i,
                )
            )
        log_skipped(self.name(), skipped, "non-object event(s)")
        return self.sort_blocks(blocks)
