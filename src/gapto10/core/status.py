from __future__ import annotations

from gapto10.core.models import Config, ProgressStatus, Section, StatusInfo, Subject
from gapto10.core.percentages import calculate_current_percentage, calculate_evaluated_percentage

HIGH_PERFORMANCE_RATIO = 70
MEDIUM_PERFORMANCE_RATIO = 40
HIGH_EVALUATED_SHARE = 0.75

LABELS = {
    ProgressStatus.NO_EVALUATIONS: "No evaluations",
    ProgressStatus.APPROVED: "Approved",
    ProgressStatus.IMPOSSIBLE: "Cannot pass",
    ProgressStatus.HIGH_PERFORMANCE: "On track",
    ProgressStatus.MEDIUM_PERFORMANCE: "Needs attention",
    ProgressStatus.LOW_PERFORMANCE: "At risk",
}


def _prefix(label: str | None) -> str:
    return f"{label}: " if label else ""


def get_progress_status(
    current: float,
    evaluated: float,
    passing_point: float,
    target: float,
    label: str | None = None,
) -> StatusInfo:
    """Classify progress towards ``passing_point`` out of ``target``.

    ``current`` is the percentage obtained, ``evaluated`` the weight already
    graded. Checks run in a fixed order and the first match wins.
    """
    remaining = target - evaluated
    max_possible = current + remaining
    can_still_pass = max_possible >= passing_point
    performance_ratio = current / evaluated * 100 if evaluated > 0 else 0.0
    prefix = _prefix(label)

    if evaluated == 0:
        return StatusInfo(
            ProgressStatus.NO_EVALUATIONS,
            LABELS[ProgressStatus.NO_EVALUATIONS],
            f"{prefix}nothing has been graded yet; {passing_point:.1f}% is needed to pass.",
        )

    summary = (
        f"{prefix}{current:.1f}% obtained out of {evaluated:.1f}% evaluated "
        f"({performance_ratio:.1f}% performance)"
    )

    if current >= passing_point:
        if evaluated >= HIGH_EVALUATED_SHARE * target:
            title = "Approved with high performance"
        else:
            title = LABELS[ProgressStatus.APPROVED]
        return StatusInfo(ProgressStatus.APPROVED, title, f"{summary}. Passing mark of {passing_point:.1f}% reached.")

    needed = passing_point - current
    if not can_still_pass:
        return StatusInfo(
            ProgressStatus.IMPOSSIBLE,
            LABELS[ProgressStatus.IMPOSSIBLE],
            f"{summary}. {needed:.1f}% more is needed but only {max(remaining, 0.0):.1f}% is left to evaluate.",
        )

    needed_of_remaining = needed / remaining * 100 if remaining > 0 else 0.0
    if performance_ratio >= HIGH_PERFORMANCE_RATIO:
        status = ProgressStatus.HIGH_PERFORMANCE
    elif performance_ratio >= MEDIUM_PERFORMANCE_RATIO:
        status = ProgressStatus.MEDIUM_PERFORMANCE
    else:
        status = ProgressStatus.LOW_PERFORMANCE
    return StatusInfo(
        status,
        LABELS[status],
        f"{summary}. {needed:.1f}% more is needed, {needed_of_remaining:.1f}% of the remaining {remaining:.1f}%.",
    )


def subject_progress_status(subject: Subject, config: Config, section: Section | None = None) -> StatusInfo:
    current = calculate_current_percentage(subject.evaluations, section)
    evaluated = calculate_evaluated_percentage(subject.evaluations, section)
    if section is None:
        target = 100.0
        label = None
    else:
        target = subject.section_weight(section) or 0.0
        label = "Theory" if section is Section.THEORY else "Practice"
    passing_point = target * config.passing_percentage / 100
    return get_progress_status(current, evaluated, passing_point, target, label=label)
