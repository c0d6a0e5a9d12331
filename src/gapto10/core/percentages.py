from __future__ import annotations

import uuid
from typing import Callable, Iterable, Iterator

from gapto10.core.models import (
    AnyEvaluation,
    Evaluation,
    Leaf,
    Section,
    SubEvaluation,
    SummativeEvaluation,
)


def is_complete(evaluation: AnyEvaluation) -> bool:
    if isinstance(evaluation, SummativeEvaluation):
        # no children means nothing has been graded yet
        return bool(evaluation.sub_evaluations) and all(child.is_graded for child in evaluation.sub_evaluations)
    return evaluation.is_graded


def is_pending(evaluation: AnyEvaluation) -> bool:
    return not is_complete(evaluation)


def in_section(evaluations: Iterable[AnyEvaluation], section: Section | None) -> list[AnyEvaluation]:
    if section is None:
        return list(evaluations)
    return [e for e in evaluations if e.section == section]


def leaves(evaluation: AnyEvaluation) -> Iterator[Leaf]:
    """Directly graded items: the evaluation itself, or its sub-evaluations."""
    if isinstance(evaluation, SummativeEvaluation):
        yield from evaluation.sub_evaluations
    else:
        yield evaluation


def leaf_contribution(leaf: Leaf) -> float:
    if leaf.obtained_points is None or leaf.max_points <= 0:
        return 0.0
    return (leaf.obtained_points / leaf.max_points) * leaf.weight


def evaluation_contribution(evaluation: AnyEvaluation) -> float:
    return sum(leaf_contribution(leaf) for leaf in leaves(evaluation))


def obtained_ratio(evaluation: AnyEvaluation) -> float:
    """Fraction of the evaluation's scale achieved, for fully graded evaluations."""
    if isinstance(evaluation, SummativeEvaluation):
        if evaluation.weight <= 0:
            return 0.0
        return evaluation_contribution(evaluation) / evaluation.weight
    if evaluation.obtained_points is None or evaluation.max_points <= 0:
        return 0.0
    return evaluation.obtained_points / evaluation.max_points


def calculate_current_percentage(
    evaluations: Iterable[AnyEvaluation],
    section: Section | None = None,
) -> float:
    """Sum of weighted contributions of everything graded so far.

    Partially graded summative evaluations count the children that already
    have a score, so callers should pass the full evaluation list.
    """
    return sum(evaluation_contribution(e) for e in in_section(evaluations, section))


def calculate_evaluated_percentage(
    evaluations: Iterable[AnyEvaluation],
    section: Section | None = None,
) -> float:
    total = 0.0
    for evaluation in in_section(evaluations, section):
        total += sum(leaf.weight for leaf in leaves(evaluation) if leaf.is_graded)
    return total


def create_sub_evaluations(
    base_name: str,
    count: int,
    weight: float,
    max_points: float,
    *,
    id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> list[SubEvaluation]:
    if count < 1:
        raise ValueError("count must be at least 1")
    share = weight / count
    return [
        SubEvaluation(id=id_factory(), name=f"{base_name.strip()} {index}", weight=share, max_points=max_points)
        for index in range(1, count + 1)
    ]


def make_evaluation(
    name: str,
    weight: float,
    max_points: float,
    *,
    section: Section | None = None,
    date: str | None = None,
    id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> Evaluation:
    return Evaluation(
        id=id_factory(),
        name=name.strip(),
        weight=weight,
        max_points=max_points,
        section=section,
        date=date,
    )
