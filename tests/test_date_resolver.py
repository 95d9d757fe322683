"""
Test suite for date resolution
"""

import unittest
import sys
import os
from datetime import date

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from event_ocr.date_resolver import (
    date_line_indexes,
    find_date_match,
    infer_year,
    is_date_line,
    month_number,
    resolve_date,
    resolve_date_range,
)

TODAY = date(2025, 6, 1)


class TestResolveDate(unittest.TestCase):
    """Test cases for single dates"""

    def test_numeric_formats(self):
        self.assertEqual(resolve_date("12/25/2025"), date(2025, 12, 25))
        self.assertEqual(resolve_date("2025-07-04"), date(2025, 7, 4))
        self.assertEqual(resolve_date("3/5/26"), date(2026, 3, 5))

    def test_abbreviated_uppercase_month(self):
        """Test abbreviations with a period and ordinal suffix"""
        self.assertEqual(resolve_date("SEPT. 5TH, 2025"), date(2025, 9, 5))

    def test_day_before_month(self):
        self.assertEqual(resolve_date("15th of March 2025"), date(2025, 3, 15))

    def test_missing_year(self):
        """Test year inference around the reference date"""
        self.assertEqual(resolve_date("DECEMBER 13TH", TODAY), date(2025, 12, 13))
        self.assertEqual(resolve_date("March 2nd", TODAY), date(2026, 3, 2))
        self.assertEqual(resolve_date("June 1", TODAY), date(2025, 6, 1))

    def test_invalid_dates(self):
        """Test impossible or missing dates give None"""
        self.assertIsNone(resolve_date("February 30, 2025"))
        self.assertIsNone(resolve_date("no date here"))
        self.assertIsNone(resolve_date(""))

    def test_infer_year(self):
        self.assertEqual(infer_year(1, 15, TODAY), date(2026, 1, 15))
        self.assertEqual(infer_year(2, 29, date(2024, 1, 1)), date(2024, 2, 29))
        self.assertIsNone(infer_year(2, 29, date(2025, 1, 1)))

    def test_leap_day_without_year(self):
        """Test Feb 29 is only placed when the current year is a leap year"""
        self.assertEqual(resolve_date("Feb 29", date(2024, 1, 1)), date(2024, 2, 29))
        self.assertIsNone(resolve_date("Feb 29", date(2025, 6, 1)))

    def test_month_number(self):
        self.assertEqual(month_number("Sept."), 9)
        self.assertEqual(month_number("DEC"), 12)
        self.assertEqual(month_number("7"), 7)
        self.assertIsNone(month_number("13"))
        self.assertIsNone(month_number("foo"))


class TestResolveDateRange(unittest.TestCase):
    """Test cases for date lines that may hold a range"""

    def test_range_with_shared_year(self):
        self.assertEqual(resolve_date_range("March 15 - March 20, 2025", TODAY),
                         (date(2025, 3, 15), date(2025, 3, 20)))

    def test_same_month_span(self):
        self.assertEqual(resolve_date_range("March 15-20, 2025", TODAY),
                         (date(2025, 3, 15), date(2025, 3, 20)))

    def test_same_month_span_without_year(self):
        self.assertEqual(resolve_date_range("March 15-20", TODAY),
                         (date(2026, 3, 15), date(2026, 3, 20)))

    def test_range_across_new_year(self):
        """Test a range that starts in December"""
        self.assertEqual(resolve_date_range("Dec 28 - Jan 3, 2026", TODAY),
                         (date(2025, 12, 28), date(2026, 1, 3)))

    def test_numeric_range(self):
        self.assertEqual(resolve_date_range("3/15/2025 - 3/20/2025", TODAY),
                         (date(2025, 3, 15), date(2025, 3, 20)))

    def test_unparseable_end_falls_back_to_start(self):
        self.assertEqual(resolve_date_range("June 7, 2025 - TBD", TODAY),
                         (date(2025, 6, 7), date(2025, 6, 7)))

    def test_dash_before_time_is_not_a_range(self):
        self.assertEqual(resolve_date_range("June 7 - 10:00 AM", TODAY),
                         (date(2025, 6, 7), date(2025, 6, 7)))

    def test_text_before_dash(self):
        """Test a dash that separates a title from the date"""
        self.assertEqual(resolve_date_range("Farmers Market - June 7, 2025", TODAY),
                         (date(2025, 6, 7), date(2025, 6, 7)))

    def test_iso_date_is_not_split(self):
        self.assertEqual(resolve_date_range("2025-06-07", TODAY),
                         (date(2025, 6, 7), date(2025, 6, 7)))

    def test_single_date_with_weekday(self):
        self.assertEqual(resolve_date_range("Saturday, June 7, 2025", TODAY),
                         (date(2025, 6, 7), date(2025, 6, 7)))

    def test_nothing_parseable(self):
        self.assertEqual(resolve_date_range("nothing", TODAY), (None, None))
        self.assertEqual(resolve_date_range("", TODAY), (None, None))


class TestDateLines(unittest.TestCase):
    """Test cases for locating date lines"""

    def test_find_first_date_line(self):
        lines = ["HARVEST FESTIVAL", "Oct 4", "Oct 5"]
        match = find_date_match(lines)
        self.assertEqual(match.line_index, 1)
        self.assertEqual(match.line, "Oct 4")
        self.assertEqual(match.rule_name, 'month_day')
        self.assertEqual(date_line_indexes(lines), [1, 2])

    def test_bare_year_is_not_a_date(self):
        self.assertIsNone(find_date_match(["Summer Fest 2025"]))
        self.assertFalse(is_date_line("Summer Fest 2025"))

    def test_no_lines(self):
        self.assertIsNone(find_date_match([]))


if __name__ == '__main__':
    unittest.main()
