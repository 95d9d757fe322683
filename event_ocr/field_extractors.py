#!/usr/bin/env python3
"""
Field Extractors

Independent single-purpose scans for location, website, host organization and
recurrence. Each walks the lines in reading order, stops at the first accepted
match and returns None rather than guessing.
"""

import re
from typing import Optional, Sequence

from event_ocr.event_patterns import (
    DATE_RULES,
    HOST_ORG_RULES,
    LOCATION_RULES,
    RECURRENCE_RULES,
    TIME_RULES,
    WEBSITE_RULES,
    RuleMatch,
    first_line_match,
)

_TRAILING_PUNCTUATION = re.compile(r'[\s,;:.!)\]]+$')
_LEADING_PUNCTUATION = re.compile(r'^[\s,;:\-–—(\[]+')


def _clean_value(value: str) -> str:
    value = re.sub(r'\s+', ' ', value or '').strip()
    value = _LEADING_PUNCTUATION.sub('', value)
    return _TRAILING_PUNCTUATION.sub('', value)


def _starts_with_time_or_date(value: str) -> bool:
    for rules in (TIME_RULES, DATE_RULES):
        for candidate in rules:
            match = candidate.pattern.search(value)
            if match and match.start() == 0:
                return True
    return False


def _accept_location(found: RuleMatch) -> bool:
    value = _clean_value(found.value)
    if len(value) <= 3 or not re.search(r'[A-Za-z]{2,}', value):
        return False
    # "Doors open at 7 PM" names a time, not a place
    return not _starts_with_time_or_date(value)


def extract_location(lines: Sequence[str]) -> Optional[str]:
    """Labelled or prepositional locations, street addresses and venue names"""
    found = first_line_match(LOCATION_RULES, lines, accept=_accept_location)
    return _clean_value(found.value) if found else None


def extract_website(lines: Sequence[str]) -> Optional[str]:
    """First URL, www. reference or bare domain; bare references get https://"""
    found = first_line_match(WEBSITE_RULES, lines)
    if not found:
        return None
    url = _TRAILING_PUNCTUATION.sub('', found.value.strip())
    if not url.lower().startswith('http'):
        url = 'https://' + url
    return url


def extract_host_org(lines: Sequence[str]) -> Optional[str]:
    """'Presented by ...' style credits or organization-shaped names"""
    found = first_line_match(
        HOST_ORG_RULES, lines, accept=lambda match: len(_clean_value(match.value)) > 2)
    return _clean_value(found.value) if found else None


def extract_recurrence(lines: Sequence[str]) -> Optional[str]:
    found = first_line_match(RECURRENCE_RULES, lines)
    return found.value.strip() if found else None
