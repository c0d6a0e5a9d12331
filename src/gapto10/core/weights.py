from __future__ import annotations

from gapto10.core.models import AnyEvaluation, Section, Subject, SummativeEvaluation, WeightCheck


def _differs(total: float, expected: float, tolerance: float) -> bool:
    # tolerance=0 keeps the exact comparison
    return abs(total - expected) > tolerance


def _weight_sum(evaluations: list[AnyEvaluation]) -> float:
    return sum(e.weight for e in evaluations)


def validate_weights(subject: Subject, *, tolerance: float = 0.0) -> WeightCheck:
    """Advisory check that evaluation weights add up to their expected totals."""
    if subject.has_split:
        if subject.theory_weight is None or subject.practice_weight is None:
            return WeightCheck(False, "Theory and practice weights must both be defined")
        if _differs(subject.theory_weight + subject.practice_weight, 100, tolerance):
            return WeightCheck(False, "Theory and practice weights must add up to 100%")

        for section, label in ((Section.THEORY, "Theory"), (Section.PRACTICE, "Practice")):
            expected = subject.section_weight(section)
            evaluations = [e for e in subject.evaluations if e.section == section]
            if evaluations and _differs(_weight_sum(evaluations), expected, tolerance):
                return WeightCheck(False, f"{label} evaluations must add up to {expected:g}%")
    elif subject.evaluations and _differs(_weight_sum(subject.evaluations), 100, tolerance):
        return WeightCheck(False, "Evaluations must add up to 100%")

    return WeightCheck(True)


def validate_sub_evaluation_weights(evaluation: SummativeEvaluation, *, tolerance: float = 0.0) -> WeightCheck:
    if not evaluation.sub_evaluations:
        return WeightCheck(False, f"{evaluation.name} has no sub-evaluations")
    total = sum(child.weight for child in evaluation.sub_evaluations)
    if _differs(total, evaluation.weight, tolerance):
        return WeightCheck(False, f"Sub-evaluations of {evaluation.name} must add up to {evaluation.weight:g}%")
    return WeightCheck(True)
