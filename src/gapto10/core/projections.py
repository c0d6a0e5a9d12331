"""Required-score projections for pending evaluations.

Every pending leaf (a plain evaluation, or a sub-evaluation of a summative
one) gets three candidate scores on its own ``max_points`` scale:

* pessimistic: heavier items carry more of what is still needed;
* normal: anchored to how similar completed evaluations went;
* optimistic: lighter items carry more, floored at the target ratio.

Ranks inside a pool come from a stable sort by weight, so ties keep the
insertion order of the subject.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from gapto10.core.models import (
    AnyEvaluation,
    CalculationResult,
    Config,
    Leaf,
    RequiredNote,
    RoundingType,
    Section,
    Subject,
    SummativeEvaluation,
)
from gapto10.core.percentages import (
    calculate_current_percentage,
    evaluation_contribution,
    is_complete,
    obtained_ratio,
)
from gapto10.core.rounding import apply_rounding
from gapto10.core.weights import validate_weights

logger = logging.getLogger(__name__)

PESSIMISTIC_SPREAD = 0.4
PESSIMISTIC_WEIGHT_BOOST = 0.5
NORMAL_SPREAD = 0.2
OPTIMISTIC_SPREAD = 0.15
DEFAULT_BASELINE_RATIO = 0.6
SIMILAR_WEIGHT_RANGE = 5


@dataclass
class _Scope:
    needed: float
    target_ratio: float
    pending: list[AnyEvaluation] = field(default_factory=list)
    completed: list[AnyEvaluation] = field(default_factory=list)

    @property
    def pool(self) -> list[Leaf]:
        pool: list[Leaf] = []
        for evaluation in self.pending:
            if isinstance(evaluation, SummativeEvaluation):
                pool.extend(evaluation.pending_sub_evaluations)
            else:
                pool.append(evaluation)
        return pool


def _clamp(value: float, upper: float) -> float:
    return max(0.0, min(value, upper))


def _rank(leaf: Leaf, pool: Sequence[Leaf], *, descending: bool) -> int:
    ordered = sorted(pool, key=lambda item: item.weight, reverse=descending)
    for index, item in enumerate(ordered):
        if item is leaf:
            return index
    return 0


def _pool_weight(pool: Sequence[Leaf]) -> float:
    return sum(item.weight for item in pool)


def _is_degenerate(leaf: Leaf, pool: Sequence[Leaf]) -> bool:
    return not pool or leaf.weight <= 0 or _pool_weight(pool) <= 0


def pessimistic_note(
    leaf: Leaf,
    needed: float,
    pool: Sequence[Leaf],
    rounding: RoundingType = RoundingType.STANDARD,
) -> float:
    if _is_degenerate(leaf, pool):
        return 0.0
    size = len(pool)
    index = _rank(leaf, pool, descending=True)
    inverse_weight_factor = 1 - (index / size) * PESSIMISTIC_SPREAD
    base_share = needed * inverse_weight_factor / size
    contribution = base_share + base_share * (leaf.weight / _pool_weight(pool)) * PESSIMISTIC_WEIGHT_BOOST
    score = _clamp(contribution / leaf.weight * leaf.max_points, leaf.max_points)
    return apply_rounding(score, rounding)


def baseline_ratio(leaf: Leaf, completed: Sequence[AnyEvaluation]) -> float:
    if not completed:
        return DEFAULT_BASELINE_RATIO
    for evaluation in completed:
        if abs(evaluation.weight - leaf.weight) < SIMILAR_WEIGHT_RANGE:
            return obtained_ratio(evaluation)
    return sum(obtained_ratio(evaluation) for evaluation in completed) / len(completed)


def normal_note(
    leaf: Leaf,
    needed: float,
    pool: Sequence[Leaf],
    completed: Sequence[AnyEvaluation],
    rounding: RoundingType = RoundingType.STANDARD,
) -> float:
    if _is_degenerate(leaf, pool):
        return 0.0
    index = _rank(leaf, pool, descending=True)
    balance_factor = 1 - (index / len(pool)) * NORMAL_SPREAD
    contribution = (needed * leaf.weight / _pool_weight(pool)) * balance_factor
    required_ratio = max(baseline_ratio(leaf, completed), contribution / leaf.weight)
    return apply_rounding(_clamp(required_ratio * leaf.max_points, leaf.max_points), rounding)


def optimistic_note(
    leaf: Leaf,
    needed: float,
    pool: Sequence[Leaf],
    target_percentage: float,
    rounding: RoundingType = RoundingType.STANDARD,
) -> float:
    if _is_degenerate(leaf, pool):
        return 0.0
    index = _rank(leaf, pool, descending=False)
    optimistic_factor = 1 + (index / len(pool)) * OPTIMISTIC_SPREAD
    contribution = (needed * leaf.weight / _pool_weight(pool)) * optimistic_factor
    calculated = _clamp(contribution / leaf.weight * leaf.max_points, leaf.max_points)
    aspirational = _clamp(target_percentage / 100 * leaf.max_points, leaf.max_points)
    return apply_rounding(max(calculated, aspirational), rounding)


def _note(leaf: Leaf, needed: float, scope: _Scope, pool: list[Leaf], config: Config, target: float) -> RequiredNote:
    note = RequiredNote(
        evaluation_id=leaf.id,
        pessimistic=pessimistic_note(leaf, needed, pool, config.rounding_type),
        normal=normal_note(leaf, needed, pool, scope.completed, config.rounding_type),
        optimistic=optimistic_note(leaf, needed, pool, target, config.rounding_type),
    )
    logger.debug("Projection for %s with %.2f%% needed: %s", leaf.id, needed, note)
    return note


def _summative_notes(
    evaluation: SummativeEvaluation,
    scope: _Scope,
    config: Config,
    target: float,
) -> list[RequiredNote]:
    pending_children = evaluation.pending_sub_evaluations
    pending_weight = sum(child.weight for child in pending_children)
    unmet = max(0.0, evaluation.weight * scope.target_ratio - evaluation_contribution(evaluation))
    parent_needed = min(scope.needed, unmet)
    pool = scope.pool

    notes = []
    for child in pending_children:
        child_needed = parent_needed * child.weight / pending_weight if pending_weight > 0 else 0.0
        notes.append(_note(child, child_needed, scope, pool, config, target))
    return notes


def _scope_notes(subject: Subject, scopes: dict[Section | None, _Scope], config: Config, target: float) -> list[RequiredNote]:
    notes: list[RequiredNote] = []
    for evaluation in subject.evaluations:
        if is_complete(evaluation):
            continue
        scope = scopes[_scope_key(subject, evaluation)]
        if isinstance(evaluation, SummativeEvaluation):
            notes.extend(_summative_notes(evaluation, scope, config, target))
        else:
            notes.append(_note(evaluation, scope.needed, scope, scope.pool, config, target))
    return notes


def _is_split(subject: Subject) -> bool:
    return subject.has_split and subject.theory_weight is not None and subject.practice_weight is not None


def _scope_key(subject: Subject, evaluation: AnyEvaluation) -> Section | None:
    if not _is_split(subject):
        return None
    # evaluations without a section are projected with the practice ones
    return Section.THEORY if evaluation.section == Section.THEORY else Section.PRACTICE


def _fill_scopes(subject: Subject, scopes: dict[Section | None, _Scope]) -> None:
    for evaluation in subject.evaluations:
        scope = scopes[_scope_key(subject, evaluation)]
        if is_complete(evaluation):
            scope.completed.append(evaluation)
        else:
            scope.pending.append(evaluation)


def calculate_required_notes(
    subject: Subject,
    config: Config,
    target_percentage: float | None = None,
) -> CalculationResult:
    """Current standing of ``subject`` plus the scores still needed to pass.

    Weight problems are reported on the result but never stop the calculation.
    """
    target = config.passing_percentage if target_percentage is None else target_percentage
    weight_check = validate_weights(subject)
    if not weight_check.is_valid:
        logger.warning("Subject %s has inconsistent weights: %s", subject.id, weight_check.message)

    if _is_split(subject):
        theory = calculate_current_percentage(subject.evaluations, Section.THEORY)
        practice = calculate_current_percentage(subject.evaluations, Section.PRACTICE)
        theory_target = subject.theory_weight * config.passing_percentage / 100
        practice_target = subject.practice_weight * config.passing_percentage / 100
        passing_ratio = config.passing_percentage / 100
        scopes: dict[Section | None, _Scope] = {
            Section.THEORY: _Scope(max(0.0, theory_target - theory), passing_ratio),
            Section.PRACTICE: _Scope(max(0.0, practice_target - practice), passing_ratio),
        }
        _fill_scopes(subject, scopes)
        theory_approved = theory >= theory_target
        practice_approved = practice >= practice_target
        return CalculationResult(
            current_percentage=theory + practice,
            current_theory_percentage=theory,
            current_practice_percentage=practice,
            is_approved=theory_approved and practice_approved,
            theory_approved=theory_approved,
            practice_approved=practice_approved,
            required_notes=_scope_notes(subject, scopes, config, target),
            weight_check=weight_check,
        )

    current = calculate_current_percentage(subject.evaluations)
    scopes = {None: _Scope(max(0.0, target - current), target / 100)}
    _fill_scopes(subject, scopes)
    return CalculationResult(
        current_percentage=current,
        is_approved=current >= target,
        required_notes=_scope_notes(subject, scopes, config, target),
        weight_check=weight_check,
    )
