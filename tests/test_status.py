import unittest

from gapto10.core.models import Config, Evaluation, ProgressStatus, Section, Subject
from gapto10.core.status import get_progress_status, subject_progress_status


class ProgressStatusTests(unittest.TestCase):
    def test_nothing_evaluated(self):
        info = get_progress_status(current=0, evaluated=0, passing_point=50, target=100)
        self.assertEqual(info.status, ProgressStatus.NO_EVALUATIONS)

    def test_approved_labels(self):
        high = get_progress_status(current=55, evaluated=80, passing_point=50, target=100)
        plain = get_progress_status(current=55, evaluated=60, passing_point=50, target=100)
        self.assertEqual(high.status, ProgressStatus.APPROVED)
        self.assertEqual(high.label, "Approved with high performance")
        self.assertEqual(plain.status, ProgressStatus.APPROVED)
        self.assertEqual(plain.label, "Approved")

    def test_impossible(self):
        info = get_progress_status(current=10, evaluated=80, passing_point=50, target=100)
        self.assertEqual(info.status, ProgressStatus.IMPOSSIBLE)
        self.assertIn("40.0%", info.details)
        self.assertIn("20.0%", info.details)

    def test_performance_bands(self):
        high = get_progress_status(current=28, evaluated=40, passing_point=50, target=100)
        medium = get_progress_status(current=20, evaluated=40, passing_point=50, target=100)
        low = get_progress_status(current=10, evaluated=40, passing_point=50, target=100)
        self.assertEqual(high.status, ProgressStatus.HIGH_PERFORMANCE)
        self.assertEqual(medium.status, ProgressStatus.MEDIUM_PERFORMANCE)
        self.assertEqual(low.status, ProgressStatus.LOW_PERFORMANCE)

    def test_details_report_the_quantities(self):
        info = get_progress_status(current=28, evaluated=40, passing_point=50, target=100)
        self.assertIn("28.0%", info.details)
        self.assertIn("40.0%", info.details)
        self.assertIn("70.0%", info.details)
        self.assertIn("22.0%", info.details)
        self.assertIn("36.7%", info.details)

    def test_label_prefix(self):
        info = get_progress_status(current=10, evaluated=20, passing_point=25, target=50, label="Theory")
        self.assertTrue(info.details.startswith("Theory: "))

    def test_every_input_gets_one_status(self):
        values = [-10.0, 0.0, 12.5, 40.0, 75.0, 100.0, 130.0]
        for current in values:
            for evaluated in values:
                info = get_progress_status(current=current, evaluated=evaluated, passing_point=50, target=100)
                self.assertIsInstance(info.status, ProgressStatus)
                self.assertEqual(info.status == ProgressStatus.NO_EVALUATIONS, evaluated == 0)


class SubjectStatusTests(unittest.TestCase):
    def setUp(self):
        self.subject = Subject(
            id="phys",
            name="Physics",
            has_split=True,
            theory_weight=60,
            practice_weight=40,
            evaluations=[
                Evaluation("t1", "Theory 1", weight=30, max_points=10, obtained_points=10, section=Section.THEORY),
                Evaluation("t2", "Theory 2", weight=30, max_points=10, section=Section.THEORY),
                Evaluation("p1", "Lab", weight=40, max_points=10, section=Section.PRACTICE),
            ],
        )

    def test_section_status(self):
        theory = subject_progress_status(self.subject, Config(), Section.THEORY)
        practice = subject_progress_status(self.subject, Config(), Section.PRACTICE)
        self.assertEqual(theory.status, ProgressStatus.APPROVED)
        self.assertIn("Theory", theory.details)
        self.assertEqual(practice.status, ProgressStatus.NO_EVALUATIONS)

    def test_whole_subject_status(self):
        info = subject_progress_status(self.subject, Config())
        self.assertEqual(info.status, ProgressStatus.HIGH_PERFORMANCE)


if __name__ == "__main__":
    unittest.main()
