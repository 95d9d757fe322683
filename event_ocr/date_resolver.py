#!/usr/bin/env python3
"""
Date Resolver

Finds the line that carries an event's date and turns it into calendar dates.

Handles numeric dates (MM/DD/YYYY, YYYY-MM-DD, ...), spelled and abbreviated
month names in any case, ordinal suffixes, day-name prefixes and dash-joined
ranges. A month and day without a year is placed in the current year unless
that day has already passed, in which case it moves to next year.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from event_ocr.event_patterns import (
    DATE_RANGE_RULES,
    DATE_RANGE_SEPARATOR,
    DATE_RULES,
    MONTH_NUMBERS,
    first_match,
    matches_any,
)

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2099


@dataclass(frozen=True)
class DateMatch:
    """The first line, in reading order, that carries a date"""
    line_index: int
    line: str
    text: str
    rule_name: str


@dataclass(frozen=True)
class DateParts:
    month: int
    day: int
    year: Optional[int] = None


def month_number(name: str) -> Optional[int]:
    """Convert a month name, abbreviation or number to 1-12"""
    if not name:
        return None
    name = name.strip().rstrip('.').lower()
    if name.isdigit():
        number = int(name)
        return number if 1 <= number <= 12 else None
    return MONTH_NUMBERS.get(name)


def _full_year(year: str) -> int:
    value = int(year)
    if len(year) == 2:
        return 2000 + value if value < 50 else 1900 + value
    return value


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def infer_year(month: int, day: int, today: date) -> Optional[date]:
    """Place a month/day in this year, or next year if it has already passed"""
    this_year = _build_date(today.year, month, day)
    # Feb 29 outside a leap year stays unresolved; it is not pushed to the next leap year
    if this_year is None:
        return None
    if this_year < today:
        return _build_date(today.year + 1, month, day)
    return this_year


def match_date_parts(fragment: str) -> Optional[DateParts]:
    """Find the first date-shaped fragment in text and split it into parts"""
    found = first_match(DATE_RULES, fragment)
    if not found:
        return None

    groups = found.match.groupdict()
    month = month_number(groups.get('month') or '')
    if month is None:
        return None

    try:
        day = int(groups['day'])
    except (KeyError, TypeError, ValueError):
        return None

    year = groups.get('year')
    return DateParts(month, day, _full_year(year) if year else None)


def _to_date(parts: Optional[DateParts], today: date) -> Optional[date]:
    if parts is None:
        return None
    if parts.year is None:
        return infer_year(parts.month, parts.day, today)
    return _build_date(parts.year, parts.month, parts.day)


def resolve_date(fragment: str, today: Optional[date] = None) -> Optional[date]:
    """Resolve a single date fragment; None when nothing valid can be built"""
    today = today or date.today()
    return _to_date(match_date_parts(fragment or ''), today)


def _borrow_year(start: DateParts, end: DateParts) -> Tuple[DateParts, DateParts]:
    """Share an explicit year across a range where only one side states it"""
    if start.year is None and end.year is not None:
        year = end.year
        # "Dec 28 - Jan 3, 2026" starts in the previous year
        if (start.month, start.day) > (end.month, end.day):
            year -= 1
        start = DateParts(start.month, start.day, year)
    elif end.year is None and start.year is not None:
        year = start.year
        if (end.month, end.day) < (start.month, start.day):
            year += 1
        end = DateParts(end.month, end.day, year)
    return start, end


def _resolve_span(text: str, today: date) -> Optional[Tuple[Optional[date], Optional[date]]]:
    found = first_match(DATE_RANGE_RULES, text)
    if not found:
        return None

    groups = found.match.groupdict()
    month = month_number(groups['month'])
    if month is None:
        return None

    year = int(groups['year']) if groups.get('year') else None
    start = _to_date(DateParts(month, int(groups['day']), year), today)
    if start is None:
        return None
    end = _build_date(start.year, month, int(groups['end_day']))
    return start, end or start


def resolve_date_range(text: str, today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    """
    Resolve a date line into (start_date, end_date).

    A single date yields start == end. When the right side of a range does not
    parse, the end falls back to the start. Nothing parseable yields (None, None).
    """
    today = today or date.today()
    text = text or ''

    span = _resolve_span(text, today)
    if span:
        logger.debug(f"Resolved same-month span {span} from: {text}")
        return span

    sides = DATE_RANGE_SEPARATOR.split(text, maxsplit=1)
    if len(sides) == 2:
        left = match_date_parts(sides[0])
        right = match_date_parts(sides[1])
        if left is not None:
            if right is not None:
                left, right = _borrow_year(left, right)
            start = _to_date(left, today)
            end = _to_date(right, today)
            if start is not None:
                logger.debug(f"Resolved date range {start} - {end} from: {text}")
                return start, end or start

    # Not a range: the first date on the line stands alone
    single = resolve_date(text, today)
    return single, single


def is_date_line(line: str) -> bool:
    return matches_any(DATE_RULES, line)


def date_line_indexes(lines: Sequence[str]) -> List[int]:
    """Indexes of every line carrying a date; none of them may become the title"""
    return [index for index, line in enumerate(lines) if is_date_line(line)]


def find_date_match(lines: Sequence[str]) -> Optional[DateMatch]:
    """The first line in reading order that satisfies any date pattern"""
    for index, line in enumerate(lines):
        found = first_match(DATE_RULES, line)
        if found:
            return DateMatch(index, line, found.match.group(0), found.rule_name)
    return None
