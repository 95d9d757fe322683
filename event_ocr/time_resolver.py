#!/usr/bin/env python3
"""
Time Resolver

Extracts a start (and optional end) time and converts it to 24-hour HH:MM.
"""

import logging
import re
from typing import Optional, Sequence, Tuple

from event_ocr.event_patterns import (
    DAY_OF_MONTH_PREFIX,
    TIME_ONLY_RULES,
    TIME_RULES,
    RuleMatch,
    first_match,
    matches_any,
)

logger = logging.getLogger(__name__)

_TIME_PARTS = re.compile(r'(\d{1,2})(?::(\d{2}))?\s*(?:([ap])\.?\s?m\.?)?', re.IGNORECASE)


def _split_time(token: str) -> Optional[Tuple[int, int, Optional[str]]]:
    match = _TIME_PARTS.search(token or '')
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    meridiem = match.group(3).lower() if match.group(3) else None
    return hours, minutes, meridiem


def _format(hours: int, minutes: int, meridiem: Optional[str]) -> Optional[str]:
    if meridiem == 'p' and hours != 12:
        hours += 12
    elif meridiem == 'a' and hours == 12:
        hours = 0

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return f"{hours:02d}:{minutes:02d}"


def to_24_hour(token: str) -> Optional[str]:
    """Convert '7:00 PM', '10am' or '14:30' to 'HH:MM'; None for anything invalid"""
    parts = _split_time(token)
    if parts is None:
        return None
    hours, minutes, meridiem = parts
    if meridiem and not 1 <= hours <= 12:
        return None
    return _format(hours, minutes, meridiem)


def _resolve_pair(start_token: str, end_token: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    end_time = to_24_hour(end_token) if end_token else None

    start_parts = _split_time(start_token)
    end_parts = _split_time(end_token) if end_token else None
    if start_parts and end_parts and start_parts[2] is None and end_parts[2] is not None:
        # "7-10 PM": the start shares the end's meridiem unless that would pass the end
        start_hour, start_minute, _ = start_parts
        end_hour, end_minute, end_meridiem = end_parts
        if 1 <= start_hour <= 12 and (start_hour % 12, start_minute) <= (end_hour % 12, end_minute):
            return _format(start_hour, start_minute, end_meridiem), end_time

    return to_24_hour(start_token), end_time


def _times(found: RuleMatch) -> Tuple[Optional[str], Optional[str]]:
    groups = found.match.groupdict()
    return _resolve_pair(groups['start'], groups.get('end'))


def _reads_day_of_month(found: RuleMatch) -> bool:
    """'June 7 - 10:00 AM': the 7 belongs to the date"""
    start = found.match.group('start')
    if ':' in start or _split_time(start)[2]:
        return False
    return bool(DAY_OF_MONTH_PREFIX.search(found.match.string[:found.match.start('start')]))


def _is_usable(found: RuleMatch) -> bool:
    if _reads_day_of_month(found):
        return False
    return _times(found)[0] is not None


def find_time(text: str) -> Tuple[Optional[str], Optional[str]]:
    """First usable time expression in text as (start_time, end_time)"""
    found = first_match(TIME_RULES, text, accept=_is_usable)
    if not found:
        return None, None
    start_time, end_time = _times(found)
    logger.debug(f"Matched time rule '{found.rule_name}': {found.match.group(0)} -> {start_time}, {end_time}")
    return start_time, end_time


def find_time_range(date_line: Optional[str], lines: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """Look on the date line first, then across the whole text"""
    if date_line:
        start_time, end_time = find_time(date_line)
        if start_time:
            return start_time, end_time
    return find_time(' '.join(lines))


def is_time_only_line(line: str) -> bool:
    return matches_any(TIME_ONLY_RULES, line)
