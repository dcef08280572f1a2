import unittest
from datetime import datetime, timezone

from runner_analytics.csv_parser import FormatError, parse_csv
from runner_analytics.metrics import calculate_advanced_metrics


SAMPLE_CSV = """date,person,miles
2024-01-01,Rajesh Kumar,5.2
2024-01-02,Priya Sharma,3.8
2024-01-03,Amit Patel,4.5
"""


class CsvParserTests(unittest.TestCase):
    def test_parses_rows_in_input_order(self):
        entries = parse_csv(SAMPLE_CSV)

        self.assertEqual([e.person for e in entries], ["Rajesh Kumar", "Priya Sharma", "Amit Patel"])
        self.assertEqual([e.miles for e in entries], [5.2, 3.8, 4.5])
        self.assertEqual(entries[0].date, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_does_not_sort_rows(self):
        entries = parse_csv("date,person,miles\n2024-03-01,A,1\n2024-01-01,B,2")
        self.assertEqual([e.person for e in entries], ["A", "B"])

    def test_bare_dates_are_utc_midnight(self):
        entry = parse_csv("date,person,miles\n2024-12-31,A,1")[0]
        self.assertIsNotNone(entry.date.tzinfo)
        self.assertEqual(entry.date.utcoffset().total_seconds(), 0)
        self.assertEqual(entry.day, "2024-12-31")

    def test_offset_dates_are_converted_to_utc(self):
        entry = parse_csv("date,person,miles\n2024-01-01T23:30:00-02:00,A,1")[0]
        self.assertEqual(entry.date, datetime(2024, 1, 2, 1, 30, tzinfo=timezone.utc))

    def test_header_is_case_insensitive_and_trimmed(self):
        entries = parse_csv(" Date , PERSON ,Miles\n2024-01-01, Alice ,2.5")
        self.assertEqual(entries[0].person, "Alice")
        self.assertEqual(entries[0].miles, 2.5)

    def test_mi_alias_and_miles_preference(self):
        self.assertEqual(parse_csv("date,person,mi\n2024-01-01,A,3")[0].miles, 3.0)
        self.assertEqual(parse_csv("date,person,mi,miles\n2024-01-01,A,1,2")[0].miles, 2.0)

    def test_column_order_and_extra_columns(self):
        entries = parse_csv("notes,miles,person,date\nfelt good,6,Bo,2024-02-02")
        self.assertEqual(entries[0].person, "Bo")
        self.assertEqual(entries[0].miles, 6.0)

    def test_zero_miles_allowed(self):
        self.assertEqual(parse_csv("date,person,miles\n2024-01-01,A,0")[0].miles, 0.0)

    def test_windows_line_endings(self):
        entries = parse_csv("date,person,miles\r\n2024-01-01,A,1\r\n2024-01-02,B,2\r\n")
        self.assertEqual(len(entries), 2)

    def test_empty_input(self):
        for text in ("", "   \n\n", "date,person,miles", "date,person,miles\n\n  \n"):
            with self.assertRaises(FormatError) as ctx:
                parse_csv(text)
            self.assertIn("empty or has no data rows", str(ctx.exception))
            self.assertIsNone(ctx.exception.row)

    def test_missing_required_columns(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,name,miles\n2024-01-01,A,1")
        self.assertIn("Missing required columns", str(ctx.exception))

    def test_column_count_mismatch(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,person,miles\n2024-01-01,A,1\n2024-01-02,B")
        self.assertEqual(ctx.exception.row, 3)
        self.assertEqual(str(ctx.exception), "Row 3: Column count mismatch")

    def test_invalid_date(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,person,miles\nnot-a-date,A,1")
        self.assertEqual(ctx.exception.row, 2)
        self.assertIn('Invalid date format "not-a-date"', str(ctx.exception))

    def test_relative_date_words_are_rejected(self):
        for word in ("now", "today", "Tomorrow", "yesterday"):
            with self.assertRaises(FormatError) as ctx:
                parse_csv(f"date,person,miles\n{word},A,1")
            self.assertEqual(ctx.exception.row, 2)
            self.assertIn("Invalid date format", str(ctx.exception))

    def test_free_form_dates_do_not_depend_on_the_clock(self):
        self.assertEqual(
            parse_csv("date,person,miles\n01/05/2024,A,1")[0].date,
            datetime(2024, 1, 5, tzinfo=timezone.utc),
        )
        # a missing year is filled from a fixed default, not from today
        first = parse_csv("date,person,miles\nJan 5,A,1")[0].date
        second = parse_csv("date,person,miles\nJan 5,A,1")[0].date
        self.assertEqual(first, second)
        self.assertEqual(first, datetime(2001, 1, 5, tzinfo=timezone.utc))

    def test_negative_miles(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,person,miles\n2024-01-01,Alice,-3")
        self.assertEqual(ctx.exception.row, 2)
        self.assertIn('Invalid miles value "-3"', str(ctx.exception))

    def test_non_numeric_and_non_finite_miles(self):
        for value in ("abc", "", "nan", "inf", "1_000", "5mi"):
            with self.assertRaises(FormatError):
                parse_csv(f"date,person,miles\n2024-01-01,Alice,{value}")

    def test_missing_person(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,person,miles\n2024-01-01,,5")
        self.assertEqual(ctx.exception.row, 2)
        self.assertIn("Person name is required", str(ctx.exception))

    def test_blank_lines_keep_original_row_numbers(self):
        with self.assertRaises(FormatError) as ctx:
            parse_csv("date,person,miles\n2024-01-01,A,1\n\n2024-01-03,B,x")
        self.assertEqual(ctx.exception.row, 4)

    def test_format_error_is_value_error(self):
        self.assertTrue(issubclass(FormatError, ValueError))

    def test_parse_and_metrics_are_deterministic(self):
        first = calculate_advanced_metrics(parse_csv(SAMPLE_CSV))
        second = calculate_advanced_metrics(parse_csv(SAMPLE_CSV))
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
