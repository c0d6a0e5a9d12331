import unittest
from datetime import date

from gapto10.core.history import build_history
from gapto10.core.models import Config, Evaluation, Section, SubEvaluation, Subject, SummativeEvaluation


class HistoryTests(unittest.TestCase):
    def test_cumulative_points_in_date_order(self):
        subject = Subject("s", "Geography", evaluations=[
            Evaluation("b", "Final", weight=60, max_points=20, obtained_points=10, date="2024-06-20"),
            Evaluation("a", "Midterm", weight=40, max_points=20, obtained_points=16, date="2024-04-10T09:00:00"),
            Evaluation("c", "Undated", weight=10, max_points=10, obtained_points=10),
            Evaluation("d", "Pending", weight=10, max_points=10, date="2024-05-01"),
        ])
        history = build_history(subject, Config())

        self.assertEqual([p.name for p in history], ["Midterm", "Final"])
        self.assertEqual(history[0].day, date(2024, 4, 10))
        self.assertEqual(history[0].percentage, 32.0)
        self.assertEqual(history[0].points, 6.4)
        self.assertEqual(history[1].evaluation_percentage, 30.0)
        self.assertEqual(history[1].percentage, 62.0)
        self.assertIsNone(history[1].theory_percentage)

    def test_split_and_summative(self):
        subject = Subject("s", "Geography", has_split=True, theory_weight=50, practice_weight=50, evaluations=[
            Evaluation("t", "Exam", weight=50, max_points=10, obtained_points=5, date="2024-03-01", section=Section.THEORY),
            SummativeEvaluation("q", "Field work", weight=50, max_points=10, date="2024-02-01", section=Section.PRACTICE,
                                sub_evaluations=[
                                    SubEvaluation("q1", "Trip 1", weight=25, max_points=10, obtained_points=10),
                                    SubEvaluation("q2", "Trip 2", weight=25, max_points=10, obtained_points=2, date="2024-04-01"),
                                ]),
        ])
        history = build_history(subject, Config())

        self.assertEqual([p.name for p in history], ["Trip 1", "Exam", "Trip 2"])
        self.assertEqual(history[0].practice_percentage, 25.0)
        self.assertEqual(history[1].theory_percentage, 25.0)
        self.assertIsNone(history[1].practice_percentage)
        self.assertEqual(history[2].practice_percentage, 30.0)
        self.assertEqual(history[2].percentage, 55.0)


if __name__ == "__main__":
    unittest.main()
