#!/usr/bin/env python3
"""
Event Text Parser

Turns raw OCR text from a flyer or poster into an EventDraft: the best-effort
set of event fields a person reviews before the record is saved.

Parsing is deterministic and keeps no state between calls, so the same text can
be re-parsed every time it is edited. It never raises; anything it cannot work
out is left as None.
"""

import logging
from dataclasses import asdict, dataclass, fields
from datetime import date
from typing import Any, Dict, List, Optional

from event_ocr.date_resolver import date_line_indexes, find_date_match, resolve_date_range
from event_ocr.event_patterns import OCR_CONFUSIONS
from event_ocr.field_extractors import (
    extract_host_org,
    extract_location,
    extract_recurrence,
    extract_website,
)
from event_ocr.time_resolver import find_time_range
from event_ocr.title_selector import is_noise_line, select_title

logger = logging.getLogger(__name__)

DESCRIPTION_LENGTH = 500


@dataclass
class EventDraft:
    """Extracted event fields; every field is independently optional"""
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None  # HH:MM, 24-hour
    end_time: Optional[str] = None
    location: Optional[str] = None
    host_org: Optional[str] = None
    website_url: Optional[str] = None
    recurrence: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping with ISO dates"""
        data = asdict(self)
        for key in ('start_date', 'end_date'):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

    def is_empty(self) -> bool:
        return all(getattr(self, field.name) is None for field in fields(self))


def normalize_text(raw_text: Optional[str]) -> str:
    """Unify line endings and repair known OCR character confusions"""
    text = (raw_text or '').replace('\r\n', '\n').replace('\r', '\n')
    for wrong, right in OCR_CONFUSIONS:
        text = text.replace(wrong, right)
    return text


def split_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines in reading order"""
    return [line.strip() for line in text.split('\n') if line.strip()]


def _describe(normalized: str, lines: List[str], draft: EventDraft) -> Optional[str]:
    # Pure noise that yielded no other field is not worth offering as a summary
    if draft.is_empty() and all(is_noise_line(line) for line in lines):
        return None
    return normalized[:DESCRIPTION_LENGTH].strip() or None


def _assemble(text: Optional[str], today: Optional[date]) -> EventDraft:
    normalized = normalize_text(text)
    lines = split_lines(normalized)
    draft = EventDraft()
    if not lines:
        return draft

    date_match = find_date_match(lines)
    if date_match:
        draft.start_date, draft.end_date = resolve_date_range(date_match.line, today)
        logger.debug(f"Date line {date_match.line_index} ({date_match.rule_name}): {date_match.line}")

    draft.start_time, draft.end_time = find_time_range(date_match.line if date_match else None, lines)
    draft.name = select_title(lines, date_line_indexes(lines))
    draft.location = extract_location(lines)
    draft.website_url = extract_website(lines)
    draft.host_org = extract_host_org(lines)
    draft.recurrence = extract_recurrence(lines)
    draft.description = _describe(normalized, lines, draft)
    return draft


def parse_event_text(text: Optional[str], today: Optional[date] = None) -> EventDraft:
    """
    Extract an event draft from OCR text.

    Args:
        text: Raw recognized text, possibly empty
        today: Reference date for placing dates that have no year (defaults to today)

    Returns:
        EventDraft; an empty draft when nothing is recognizable
    """
    try:
        draft = _assemble(text, today)
    except Exception as e:
        logger.exception(f"Event text parsing failed, returning empty draft: {e}")
        return EventDraft()

    logger.debug(f"Parsed event draft: {draft}")
    return draft
