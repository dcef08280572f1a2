import unittest

from runner_analytics.data_manager import DataManager, View
from runner_analytics.metrics import Trend


VALID_CSV = """date,person,miles
2024-01-01,Rajesh Kumar,5.2
2024-01-02,Priya Sharma,3.8
2024-01-03,Amit Patel,4.5
2024-01-04,Priya Sharma,4.2
2024-01-05,Priya Sharma,4.6
"""


class DataManagerTests(unittest.TestCase):
    def setUp(self):
        self.manager = DataManager()

    def test_starts_awaiting_upload(self):
        self.assertEqual(self.manager.view, View.UPLOAD)
        self.assertFalse(self.manager.has_data)
        self.assertIsNone(self.manager.df)

    def test_load_valid_text(self):
        self.assertTrue(self.manager.load_text(VALID_CSV))
        self.assertEqual(self.manager.view, View.OVERALL)
        self.assertEqual(len(self.manager.entries), 5)
        self.assertIsInstance(self.manager.entries, tuple)
        self.assertEqual(self.manager.error, "")
        self.assertEqual(self.manager.selected_person, "Amit Patel")
        self.assertEqual(len(self.manager.df), 5)

    def test_rejected_upload_keeps_message_and_drops_data(self):
        self.manager.load_text(VALID_CSV)
        self.assertFalse(self.manager.load_text("date,person,miles\n2024-01-01,,5"))
        self.assertEqual(self.manager.error, "Row 2: Person name is required")
        self.assertEqual(self.manager.view, View.UPLOAD)
        self.assertEqual(self.manager.entries, ())
        self.assertIsNone(self.manager.df)

    def test_empty_upload(self):
        self.assertFalse(self.manager.load_text(""))
        self.assertEqual(self.manager.error, "CSV file is empty or has no data rows")

    def test_reset(self):
        self.manager.load_text(VALID_CSV)
        self.manager.reset()
        self.assertEqual(self.manager.view, View.UPLOAD)
        self.assertFalse(self.manager.has_data)
        self.assertIsNone(self.manager.selected_person)

    def test_views_need_data(self):
        with self.assertRaises(ValueError):
            self.manager.set_view("person")
        self.manager.load_text(VALID_CSV)
        self.assertEqual(self.manager.set_view("person"), View.PERSON)
        self.assertEqual(self.manager.set_view(View.UPLOAD), View.UPLOAD)

    def test_select_person(self):
        self.manager.load_text(VALID_CSV)
        self.assertEqual(self.manager.people(), ["Amit Patel", "Priya Sharma", "Rajesh Kumar"])
        self.manager.select_person("Priya Sharma")
        self.assertEqual(self.manager.selected_person, "Priya Sharma")
        with self.assertRaises(ValueError):
            self.manager.select_person("priya sharma")

    def test_entries_for_reads_dataframe_in_upload_order(self):
        self.manager.load_text(VALID_CSV)
        runs = self.manager.entries_for("Priya Sharma")
        self.assertEqual([run.miles for run in runs], [3.8, 4.2, 4.6])
        self.assertEqual(self.manager.entries_for("Nobody"), [])
        self.manager.reset()
        self.assertEqual(self.manager.entries_for("Priya Sharma"), [])
        self.assertEqual(self.manager.people(), [])

    def test_overall_summary(self):
        self.manager.load_text(VALID_CSV)
        summary = self.manager.overall_summary()
        self.assertEqual(summary["metrics"]["count"], 5)
        self.assertAlmostEqual(summary["metrics"]["total"], 22.3, places=2)
        self.assertEqual(len(summary["daily_totals"]), 5)
        self.assertEqual(summary["totals_by_person"][0]["person"], "Priya Sharma")
        self.assertEqual([row["person"] for row in summary["comparison"]],
                         ["Rajesh Kumar", "Priya Sharma", "Amit Patel"])
        self.assertIn(summary["consistency_label"], ("Excellent", "Good", "Improving"))
        self.assertGreater(summary["prediction"]["confidence"], 0)

    def test_person_summary(self):
        self.manager.load_text(VALID_CSV)
        summary = self.manager.person_summary("Priya Sharma")
        self.assertEqual(summary["metrics"]["count"], 3)
        self.assertEqual(summary["metrics"]["trend"], Trend.IMPROVING)
        self.assertEqual(len(summary["moving_average"]), 3)
        self.assertEqual(
            summary["monthly_confidence"],
            round(summary["prediction"]["confidence"] * 0.85),
        )

    def test_person_summary_defaults_to_selection(self):
        self.manager.load_text(VALID_CSV)
        self.assertEqual(self.manager.person_summary()["person"], "Amit Patel")
        # fewer than three runs: no forecast
        self.assertEqual(self.manager.person_summary()["prediction"]["confidence"], 0)

    def test_person_summary_unknown(self):
        self.manager.load_text(VALID_CSV)
        with self.assertRaises(ValueError):
            self.manager.person_summary("Nobody")


if __name__ == "__main__":
    unittest.main()
