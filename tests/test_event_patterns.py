"""
Test suite for the pattern rule evaluator
"""

import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from event_ocr.event_patterns import (
    DATE_RANGE_SEPARATOR,
    DATE_RULES,
    TIME_RULES,
    first_line_match,
    first_match,
    matches_any,
    rule,
)


class TestRuleEvaluation(unittest.TestCase):
    """Test cases for ordered first-match evaluation"""

    def setUp(self):
        self.rules = [rule('foo', r'foo'), rule('bar', r'bar')]

    def test_rule_order_beats_position(self):
        """Test the earlier rule wins even when a later rule matches first in the text"""
        found = first_match(self.rules, "bar foo")
        self.assertEqual(found.rule_name, 'foo')
        self.assertEqual(found.match.start(), 4)

    def test_no_match(self):
        self.assertIsNone(first_match(self.rules, ""))
        self.assertIsNone(first_match(self.rules, "baz"))
        self.assertFalse(matches_any(self.rules, "baz"))
        self.assertTrue(matches_any(self.rules, "BAR"))

    def test_line_order(self):
        found = first_line_match(self.rules, ["nothing", "a bar"])
        self.assertEqual(found.line_index, 1)
        self.assertEqual(found.rule_name, 'bar')

    def test_accept_predicate(self):
        """Test rejected matches are skipped"""
        rules = [rule('number', r'(?P<value>\d+)')]
        found = first_line_match(rules, ["7", "42"], accept=lambda match: len(match.value) > 1)
        self.assertEqual(found.value, '42')
        self.assertEqual(found.line_index, 1)

    def test_accept_moves_to_next_match_in_text(self):
        rules = [rule('number', r'(?P<value>\d+)'), rule('word', r'(?P<value>[a-z]+)')]
        found = first_match(rules, "7 and 42", accept=lambda match: len(match.value) > 1)
        self.assertEqual(found.rule_name, 'number')
        self.assertEqual(found.value, '42')

        found = first_match(rules, "7 and 8", accept=lambda match: len(match.value) > 1)
        self.assertEqual(found.value, 'and')

    def test_value_without_group(self):
        found = first_match(self.rules, "a foo b")
        self.assertEqual(found.value, 'foo')


class TestPatternLibraries(unittest.TestCase):

    def test_bare_year_is_not_a_date(self):
        self.assertFalse(matches_any(DATE_RULES, "Summer Fest 2025"))

    def test_dates_are_not_times(self):
        self.assertIsNone(first_match(TIME_RULES, "12/25/2025"))

    def test_range_separator(self):
        self.assertEqual(DATE_RANGE_SEPARATOR.split("March 15 - March 20, 2025", maxsplit=1),
                         ["March 15", "March 20, 2025"])
        self.assertEqual(DATE_RANGE_SEPARATOR.split("2025-06-07", maxsplit=1), ["2025-06-07"])


if __name__ == '__main__':
    unittest.main()
