#!/usr/bin/env python3
"""
Title Selector

Picks the line most likely to be the event name out of a flyer's mixed title,
date/time, address and promotional lines.
"""

import logging
import re
from typing import Iterable, Optional, Sequence

from event_ocr.event_patterns import ADDRESS_RULES, BODY_COPY_WORDS, TITLE_KEYWORDS, matches_any
from event_ocr.time_resolver import is_time_only_line

logger = logging.getLogger(__name__)

# Scoring weights
ALL_CAPS_BONUS = 50
KEYWORD_BONUS = 30
WORD_COUNT_BONUS = 20
LENGTH_BONUS = 10
BODY_COPY_PENALTY = -20

MIN_TITLE_WORDS, MAX_TITLE_WORDS = 2, 5
MIN_TITLE_LENGTH, MAX_TITLE_LENGTH = 10, 60

# A candidate must score above this to win outright
SCORE_FLOOR = -1

_LETTER_RUN = re.compile(r'[A-Za-z]{2,}')
_EDGE_ARTIFACTS = re.compile(r'^[\s|\-–—]+|[\s|\-–—]+$')


def score_title(line: str) -> int:
    """Score a line as a potential event title; higher is more title-like"""
    score = 0

    # Flyers commonly set titles in full caps
    if line.isupper() and len(line) > 5:
        score += ALL_CAPS_BONUS

    if TITLE_KEYWORDS.search(line):
        score += KEYWORD_BONUS

    word_count = len(line.split())
    if MIN_TITLE_WORDS <= word_count <= MAX_TITLE_WORDS:
        score += WORD_COUNT_BONUS

    if MIN_TITLE_LENGTH <= len(line) <= MAX_TITLE_LENGTH:
        score += LENGTH_BONUS

    if BODY_COPY_WORDS.search(line):
        score += BODY_COPY_PENALTY

    return score


def is_address_line(line: str) -> bool:
    return matches_any(ADDRESS_RULES, line)


def is_noise_line(line: str) -> bool:
    """OCR noise: no token holds even two letters in a row"""
    return not _LETTER_RUN.search(line or '')


def clean_title(text: str) -> Optional[str]:
    """Collapse whitespace and strip pipe/dash artifacts from the ends"""
    cleaned = re.sub(r'\s+', ' ', text or '').strip()
    cleaned = _EDGE_ARTIFACTS.sub('', cleaned)
    return cleaned or None


def _is_excluded(line: str) -> bool:
    return not line or is_address_line(line) or is_time_only_line(line) or is_noise_line(line)


def select_title(lines: Sequence[str], date_lines: Iterable[int] = ()) -> Optional[str]:
    """
    Choose the event name from normalized lines.

    Date lines, address lines, time-only lines and noise are never candidates.
    The highest score wins and ties go to the earliest line. When nothing scores
    above the floor, the first line that is not excluded is used instead.
    """
    excluded = set(date_lines)
    best_line = None
    best_score = SCORE_FLOOR

    for index, line in enumerate(lines):
        if index in excluded or _is_excluded(line):
            continue
        score = score_title(line)
        logger.debug(f"Title candidate {score:>4}: {line}")
        if score > best_score:
            best_score = score
            best_line = line

    if best_line is None:
        for index, line in enumerate(lines):
            if index not in excluded and not _is_excluded(line):
                best_line = line
                break

    if best_line is None:
        return None
    return clean_title(best_line)
