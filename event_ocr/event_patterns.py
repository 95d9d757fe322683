#!/usr/bin/env python3
"""
Event Text Patterns

Pattern libraries used to pull event fields out of OCR text. Every library is an
ordered list of named rules consumed by the generic first-match evaluator below,
so supporting a new phrasing means adding a rule rather than a code path.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Match, Optional, Pattern, Sequence


@dataclass(frozen=True)
class PatternRule:
    """A named matching rule"""
    name: str
    pattern: Pattern


@dataclass(frozen=True)
class RuleMatch:
    """A successful rule evaluation"""
    rule: PatternRule
    match: Match
    line_index: int = -1

    @property
    def rule_name(self) -> str:
        return self.rule.name

    @property
    def value(self) -> str:
        """The captured `value` group, or the whole match for rules without one"""
        if 'value' in self.rule.pattern.groupindex:
            return self.match.group('value') or ''
        return self.match.group(0)


def rule(name: str, pattern: str, flags: int = re.IGNORECASE) -> PatternRule:
    return PatternRule(name, re.compile(pattern, flags))


def iter_matches(pattern: Pattern, text: str) -> Iterator[Match]:
    """Every match of pattern, left to right, including overlapping ones"""
    pos = 0
    while pos <= len(text):
        match = pattern.search(text, pos)
        if not match:
            return
        yield match
        pos = match.start() + 1


def first_match(rules: Sequence[PatternRule], text: str,
                accept: Optional[Callable[[RuleMatch], bool]] = None) -> Optional[RuleMatch]:
    """
    Try rules in order and return the first one that matches anywhere in text.

    With an accept predicate, a rejected match moves on to the rule's next match
    in the text, then to the next rule.
    """
    if not text:
        return None
    for candidate in rules:
        for match in iter_matches(candidate.pattern, text):
            found = RuleMatch(candidate, match)
            if accept is None or accept(found):
                return found
    return None


def first_line_match(rules: Sequence[PatternRule], lines: Iterable[str],
                     accept: Optional[Callable[[RuleMatch], bool]] = None) -> Optional[RuleMatch]:
    """Scan lines in reading order; each line is tried against every rule before moving on"""
    for index, line in enumerate(lines):
        for candidate in rules:
            match = candidate.pattern.search(line)
            if not match:
                continue
            found = RuleMatch(candidate, match, index)
            if accept is None or accept(found):
                return found
    return None


def matches_any(rules: Sequence[PatternRule], text: str) -> bool:
    return first_match(rules, text) is not None


# Known OCR confusions, applied in order during normalization
OCR_CONFUSIONS = [
    ('|', 'I'),  # vertical bar read in place of a capital I
]

MONTH_NUMBERS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9, 'sept': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

# Building blocks
MONTH = (r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?'
         r'|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)')
ORDINAL = r'(?:st|nd|rd|th)?'
MERIDIEM = r'[ap]\.?\s?m\.?(?![a-z])'
CLOCK = r'\d{1,2}:\d{2}'
TIME_TOKEN = rf'(?:{CLOCK}(?:\s*{MERIDIEM})?|\d{{1,2}}\s*{MERIDIEM})'
TIME_CONNECTOR = r'\s*(?:[-–—]+|\bto\b|\buntil\b|\btill\b|\bthru\b|\bthrough\b)\s*'

# Dates: each rule exposes month/day and optionally year as named groups.
# Full dates come first so a stated year is never lost to a shorter match.
DATE_RULES: List[PatternRule] = [
    rule('iso', r'\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b'),
    rule('numeric_slash', r'\b(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4}|\d{2})\b'),
    rule('numeric_dash', r'\b(?P<month>\d{1,2})-(?P<day>\d{1,2})-(?P<year>\d{4})\b'),
    rule('numeric_dot', r'\b(?P<month>\d{1,2})\.(?P<day>\d{1,2})\.(?P<year>\d{4})\b'),
    rule('month_day_year',
         rf'\b(?P<month>{MONTH})\.?\s+(?P<day>\d{{1,2}}){ORDINAL},?\s+(?P<year>\d{{4}})\b'),
    rule('day_month_year',
         rf'\b(?P<day>\d{{1,2}}){ORDINAL}\s+(?:of\s+)?(?P<month>{MONTH})\.?,?\s+(?P<year>\d{{4}})\b'),
    rule('month_day', rf'\b(?P<month>{MONTH})\.?\s+(?P<day>\d{{1,2}}){ORDINAL}\b(?!:)'),
    rule('day_month', rf'\b(?P<day>\d{{1,2}}){ORDINAL}\s+(?:of\s+)?(?P<month>{MONTH})\b'),
]

# Ranges that share a month on both ends ("March 15-20, 2025")
DATE_RANGE_RULES: List[PatternRule] = [
    rule('same_month_span',
         rf'\b(?P<month>{MONTH})\.?\s+(?P<day>\d{{1,2}}){ORDINAL}\s*[-–—]+\s*'
         rf'(?P<end_day>\d{{1,2}}){ORDINAL}(?![\d:])(?!\s*{MERIDIEM})(?:,?\s+(?P<year>\d{{4}})\b)?'),
]

# Splits a date line into the two sides of a dash-joined range
DATE_RANGE_SEPARATOR = re.compile(r'\s*[–—]+\s*|\s+-+\s*|\s*-+\s+|(?<=\d{4})-(?=\d{1,2}[/.])')

# Times: `start` and optional `end` groups
TIME_RULES: List[PatternRule] = [
    rule('time_range',
         rf'(?<![\d:/])(?P<start>{CLOCK}(?:\s*{MERIDIEM})?|\d{{1,2}}(?:\s*{MERIDIEM})?)'
         rf'{TIME_CONNECTOR}(?P<end>{TIME_TOKEN})'),
    rule('clock', rf'(?<![\d:/])(?P<start>{CLOCK}(?:\s*{MERIDIEM})?)'),
    rule('hour_meridiem', rf'(?<![\d:/])(?P<start>\d{{1,2}}\s*{MERIDIEM})'),
]

# Text ending in a month name: a number right after it is a day, not an hour
DAY_OF_MONTH_PREFIX = re.compile(rf'\b{MONTH}\.?\s+$', re.IGNORECASE)

TIME_ONLY_RULES: List[PatternRule] = [
    rule('time_only', rf'^\s*(?:from\s+)?{TIME_TOKEN}(?:{TIME_CONNECTOR}{TIME_TOKEN})?\s*[.,;]?\s*$'),
    rule('leading_clock', rf'^{CLOCK}.{{0,24}}$', 0),
]

STREET_SUFFIX = (r'(?i:st|street|ave|avenue|rd|road|blvd|boulevard|dr|drive|ln|lane|way|pl|place'
                 r'|ct|court|pkwy|parkway|hwy|highway|ter|terrace|cir|circle)')

# Street-address shapes; a line matching any of these is never a title
ADDRESS_RULES: List[PatternRule] = [
    rule('street', rf'\b\d{{1,6}}\s+(?:[A-Z0-9][\w\'.]*\s+){{1,4}}{STREET_SUFFIX}\b', 0),
    rule('postal_code', r'\b\d{5}(?:-\d{4})?\b', 0),
    rule('city_state', r'^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z]{2}\b', 0),
    rule('country', r'\bUnited States\b', 0),
]

LOCATION_RULES: List[PatternRule] = [
    rule('label',
         r'(?:^(?:location|venue|address|where|place)\b|\b(?:location|venue|address|where|place)\s*:)'
         r'\s*:?\s*(?P<value>.+)'),
    rule('preposition',
         r'(?:^|(?<=\s)|(?<=[(\[]))(?:held at|hosted at|at|@)(?!\w)\s*:?\s*(?P<value>.+)'),
    rule('street_address',
         rf'(?P<value>\b\d{{1,6}}\s+(?:[A-Z0-9][\w\'.]*\s+){{1,4}}{STREET_SUFFIX}\b.*)', 0),
    rule('venue_name',
         r'(?P<value>\b[A-Z][\w\'.&]*(?:\s+(?:of|the|[A-Z][\w\'.&]*))*\s+'
         r'(?i:theater|theatre|hall|center|centre|auditorium|building|campus|park|plaza|square'
         r'|museum|gallery|library|cafe|restaurant|church|stadium|arena|pavilion|fairgrounds))\b', 0),
]

WEBSITE_RULES: List[PatternRule] = [
    rule('http_url', r'(?P<value>\bhttps?://[^\s]+)'),
    rule('www', r'(?P<value>\bwww\.[^\s]+)'),
    rule('bare_domain',
         r'(?<![@\w.-])(?P<value>[a-z0-9][a-z0-9-]*(?:\.[a-z0-9-]+)*'
         r'\.(?:com|org|net|edu|gov|io|co|us|info|biz)\b(?:/[^\s]*)?)'),
]

HOST_ORG_RULES: List[PatternRule] = [
    rule('introduced_by',
         r'\b(?:(?:presented|hosted|sponsored|organized|organised)\s+by|by)\b\s*:?\s*(?P<value>.+)'),
    rule('organization_suffix',
         r'(?P<value>\b[A-Z][\w\'.&]*(?:\s+(?:of|the|and|for|&|[A-Z][\w\'.&]*))*\s+'
         r'(?i:association|society|club|group|foundation|institute|organization|organisation'
         r'|committee|council|board|league|alliance|guild|coalition))\b', 0),
]

RECURRENCE_RULES: List[PatternRule] = [
    rule('cadence',
         r'\b(?P<value>annual(?:ly)?|yearly|bi-?weekly|bi-?monthly|monthly|weekly|daily|quarterly|seasonal)\b'),
    rule('every',
         r'\b(?P<value>every\s+(?:other\s+)?(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday'
         r'|day|week|month|year|weekend)s?)\b'),
]

# Title scoring vocabularies
TITLE_KEYWORDS = re.compile(
    r'\b(?:market|event|festival|fest|show|concert|fair|celebration|gathering|meeting|workshop|class'
    r'|tour|trail|race|run|walk|hike|talk|lecture|performance|exhibition|gallery|opening|closing'
    r'|party|gala|dinner|lunch|breakfast|brunch|tea|tasting|cleanup|clean-up|sale|parade|fundraiser)\b',
    re.IGNORECASE)

BODY_COPY_WORDS = re.compile(
    r'\b(?:for|with|including|featuring|presented|hosted|sponsored)\b', re.IGNORECASE)
