import unittest

from gapto10.core.models import Evaluation, Section, SubEvaluation, Subject, SummativeEvaluation
from gapto10.core.weights import validate_sub_evaluation_weights, validate_weights


def _evaluations(*weights, section=None):
    return [
        Evaluation(f"e{i}", f"Evaluation {i}", weight=w, max_points=20, section=section)
        for i, w in enumerate(weights)
    ]


class UnsplitWeightTests(unittest.TestCase):
    def test_weights_must_reach_100(self):
        check = validate_weights(Subject("s", "Maths", evaluations=_evaluations(30, 30, 30)))
        self.assertFalse(check.is_valid)
        self.assertIn("100%", check.message)

    def test_valid_weights(self):
        self.assertTrue(validate_weights(Subject("s", "Maths", evaluations=_evaluations(40, 60))).is_valid)

    def test_empty_subject_is_valid(self):
        self.assertTrue(validate_weights(Subject("s", "Maths")).is_valid)

    def test_tolerance_is_opt_in(self):
        subject = Subject("s", "Maths", evaluations=_evaluations(33.3, 33.3, 33.4000001))
        self.assertFalse(validate_weights(subject).is_valid)
        self.assertTrue(validate_weights(subject, tolerance=1e-3).is_valid)


class SplitWeightTests(unittest.TestCase):
    def _subject(self, theory=60, practice=40, evaluations=()):
        return Subject("s", "Chemistry", has_split=True, theory_weight=theory, practice_weight=practice, evaluations=list(evaluations))

    def test_section_weights_required(self):
        check = validate_weights(self._subject(practice=None))
        self.assertFalse(check.is_valid)

    def test_section_weights_add_up_to_100(self):
        check = validate_weights(self._subject(theory=60, practice=30))
        self.assertFalse(check.is_valid)
        self.assertIn("100%", check.message)

    def test_theory_evaluations_match_theory_weight(self):
        subject = self._subject(evaluations=_evaluations(30, 20, section=Section.THEORY))
        check = validate_weights(subject)
        self.assertFalse(check.is_valid)
        self.assertEqual(check.message, "Theory evaluations must add up to 60%")

    def test_practice_evaluations_match_practice_weight(self):
        evaluations = _evaluations(60, section=Section.THEORY) + _evaluations(25, section=Section.PRACTICE)
        check = validate_weights(self._subject(evaluations=evaluations))
        self.assertFalse(check.is_valid)
        self.assertEqual(check.message, "Practice evaluations must add up to 40%")

    def test_empty_section_is_not_checked(self):
        subject = self._subject(evaluations=_evaluations(60, section=Section.THEORY))
        self.assertTrue(validate_weights(subject).is_valid)


class SubEvaluationWeightTests(unittest.TestCase):
    def test_children_add_up_to_parent(self):
        summative = SummativeEvaluation(
            "q", "Quizzes", weight=20, max_points=10,
            sub_evaluations=[SubEvaluation("q1", "Quiz 1", 10, 10), SubEvaluation("q2", "Quiz 2", 10, 10)],
        )
        self.assertTrue(validate_sub_evaluation_weights(summative).is_valid)
        summative.sub_evaluations.pop()
        self.assertFalse(validate_sub_evaluation_weights(summative).is_valid)

    def test_empty_container(self):
        summative = SummativeEvaluation("q", "Quizzes", weight=20, max_points=10)
        self.assertFalse(validate_sub_evaluation_weights(summative).is_valid)


if __name__ == "__main__":
    unittest.main()
