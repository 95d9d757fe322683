"""
Event OCR: event drafts from photographed flyers and posters
"""

from event_ocr.event_text_parser import EventDraft, normalize_text, parse_event_text, split_lines

__all__ = ['EventDraft', 'normalize_text', 'parse_event_text', 'split_lines']
