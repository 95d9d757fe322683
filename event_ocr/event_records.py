#!/usr/bin/env python3
"""
Event Records

Turns event drafts into insertable event records and merges them into records a
person is already editing. A draft only fills fields that are still empty; it
never overwrites a value someone typed.
"""

import logging
import re
import threading
from typing import Any, Dict, List, Optional, Tuple

from event_ocr.event_text_parser import EventDraft, parse_event_text

logger = logging.getLogger(__name__)

DRAFT_STATUS = 'draft'
DEFAULT_SORT_ORDER = 1000

DRAFT_FIELDS = (
    'name', 'start_date', 'end_date', 'start_time', 'end_time',
    'location', 'host_org', 'website_url', 'recurrence', 'description',
)


def slugify(text: Optional[str]) -> str:
    """Convert a name to a URL-friendly slug"""
    slug = (text or '').lower().strip()
    slug = re.sub(r"['‘’`]", '', slug)
    slug = re.sub(r'[^a-z0-9]+', '-', slug)
    return slug.strip('-')


def draft_to_event_record(draft: EventDraft, raw_text: Optional[str] = None) -> Dict[str, Any]:
    """Build a new event record from a draft"""
    data = draft.to_dict()
    record = {field: data[field] for field in DRAFT_FIELDS}
    record['name'] = data['name'] or ''
    record['slug'] = slugify(data['name'])
    record['end_date'] = data['end_date'] or data['start_date']
    record['time_all_day'] = not data['start_time'] and not data['end_time']
    record['ocr_text'] = raw_text or None
    record['status'] = DRAFT_STATUS
    record['sort_order'] = DEFAULT_SORT_ORDER
    return record


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def merge_draft_into_record(record: Optional[Dict[str, Any]],
                            draft: EventDraft) -> Tuple[Dict[str, Any], List[str]]:
    """
    Fill the record's empty fields from the draft.

    Returns:
        (merged record, names of the fields that were filled). The input record
        is left untouched.
    """
    merged = dict(record or {})
    data = draft.to_dict()
    filled = []

    for field in DRAFT_FIELDS:
        value = data[field]
        if value is None or not _is_blank(merged.get(field)):
            continue
        merged[field] = value
        filled.append(field)

    if 'name' in filled and _is_blank(merged.get('slug')):
        merged['slug'] = slugify(merged['name'])

    return merged, filled


class OcrDraftSession:
    """
    Keeps one editing session's OCR results in order.

    Each OCR request takes a token from begin(). A result is merged only if its
    token is still the latest, so a slow earlier request can never overwrite
    the draft from a newer image.
    """

    def __init__(self, record: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._latest_token = 0
        self.record: Dict[str, Any] = dict(record or {})
        self.raw_text: Optional[str] = None
        self.draft: Optional[EventDraft] = None

    def begin(self) -> int:
        """Start an OCR request and return its token"""
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest_token

    def complete(self, token: int, raw_text: str) -> Optional[EventDraft]:
        """Parse an OCR result and merge it, unless a newer request superseded it"""
        draft = parse_event_text(raw_text)
        with self._lock:
            if token != self._latest_token:
                logger.info(f"Discarding stale OCR result {token} (latest is {self._latest_token})")
                return None
            self._apply(raw_text, draft)
        return draft

    def reparse(self, raw_text: str) -> EventDraft:
        """Re-derive the draft after the recognized text was edited by hand"""
        draft = parse_event_text(raw_text)
        with self._lock:
            self._apply(raw_text, draft)
        return draft

    def _apply(self, raw_text: str, draft: EventDraft) -> None:
        self.raw_text = raw_text
        self.draft = draft
        self.record, filled = merge_draft_into_record(self.record, draft)
        self.record['ocr_text'] = raw_text or None
        logger.info(f"Merged OCR draft fields: {', '.join(filled) or 'none'}")
