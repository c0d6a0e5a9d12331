from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from gapto10.core.models import Config, Section, Subject, SummativeEvaluation
from gapto10.core.percentages import leaf_contribution


@dataclass(frozen=True)
class HistoryPoint:
    day: date
    name: str
    percentage: float
    points: float
    evaluation_percentage: float
    evaluation_points: float
    theory_percentage: float | None = None
    practice_percentage: float | None = None


def _parse_day(value: str) -> date:
    return date.fromisoformat(value[:10])


def build_history(subject: Subject, config: Config) -> list[HistoryPoint]:
    """Cumulative standing after each dated, graded item, oldest first."""
    dated = []
    for evaluation in subject.evaluations:
        if isinstance(evaluation, SummativeEvaluation):
            for child in evaluation.sub_evaluations:
                when = child.date or evaluation.date
                if child.is_graded and when:
                    dated.append((_parse_day(when), child.name, leaf_contribution(child), evaluation.section))
        elif evaluation.is_graded and evaluation.date:
            dated.append((_parse_day(evaluation.date), evaluation.name, leaf_contribution(evaluation), evaluation.section))
    dated.sort(key=lambda item: item[0])

    cumulative = theory = practice = 0.0
    points = []
    for day, name, obtained, section in dated:
        cumulative += obtained
        theory_value = practice_value = None
        if subject.has_split:
            if section == Section.THEORY:
                theory += obtained
                theory_value = round(theory, 2)
            elif section == Section.PRACTICE:
                practice += obtained
                practice_value = round(practice, 2)
        points.append(
            HistoryPoint(
                day=day,
                name=name,
                percentage=round(cumulative, 2),
                points=round(cumulative / config.percentage_per_point, 2),
                evaluation_percentage=round(obtained, 2),
                evaluation_points=round(obtained / config.percentage_per_point, 2),
                theory_percentage=theory_value,
                practice_percentage=practice_value,
            )
        )
    return points
