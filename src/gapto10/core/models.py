from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Section(str, Enum):
    THEORY = "theory"
    PRACTICE = "practice"


class RoundingType(str, Enum):
    STANDARD = "standard"
    FLOOR = "floor"
    CEIL = "ceil"


class ProgressStatus(str, Enum):
    NO_EVALUATIONS = "no_evaluations"
    APPROVED = "approved"
    IMPOSSIBLE = "impossible"
    HIGH_PERFORMANCE = "high_performance"
    MEDIUM_PERFORMANCE = "medium_performance"
    LOW_PERFORMANCE = "low_performance"


@dataclass
class SubEvaluation:
    """Child item of a summative evaluation. Its weight is a share of the parent's."""

    id: str
    name: str
    weight: float
    max_points: float
    obtained_points: float | None = None
    date: str | None = None

    @property
    def is_graded(self) -> bool:
        return self.obtained_points is not None


@dataclass
class Evaluation:
    id: str
    name: str
    weight: float
    max_points: float
    obtained_points: float | None = None
    date: str | None = None
    section: Section | None = None

    @property
    def is_graded(self) -> bool:
        return self.obtained_points is not None


@dataclass
class SummativeEvaluation:
    """Container whose score comes entirely from its sub-evaluations."""

    id: str
    name: str
    weight: float
    max_points: float
    sub_evaluations: list[SubEvaluation] = field(default_factory=list)
    date: str | None = None
    section: Section | None = None

    @property
    def pending_sub_evaluations(self) -> list[SubEvaluation]:
        return [child for child in self.sub_evaluations if not child.is_graded]


AnyEvaluation = Union[Evaluation, SummativeEvaluation]
Leaf = Union[Evaluation, SubEvaluation]


@dataclass
class Subject:
    id: str
    name: str
    has_split: bool = False
    theory_weight: float | None = None
    practice_weight: float | None = None
    evaluations: list[AnyEvaluation] = field(default_factory=list)

    def section_weight(self, section: Section) -> float | None:
        return self.theory_weight if section is Section.THEORY else self.practice_weight


@dataclass(frozen=True)
class Config:
    default_max_points: float = 20
    percentage_per_point: float = 5
    passing_percentage: float = 50
    rounding_type: RoundingType = RoundingType.STANDARD
    show_json_in_export_import: bool = False


@dataclass(frozen=True)
class WeightCheck:
    is_valid: bool
    message: str | None = None


@dataclass(frozen=True)
class RequiredNote:
    evaluation_id: str
    pessimistic: float
    normal: float
    optimistic: float


@dataclass
class CalculationResult:
    current_percentage: float
    is_approved: bool
    required_notes: list[RequiredNote] = field(default_factory=list)
    current_theory_percentage: float | None = None
    current_practice_percentage: float | None = None
    theory_approved: bool | None = None
    practice_approved: bool | None = None
    weight_check: WeightCheck = field(default_factory=lambda: WeightCheck(True))

    def note_for(self, evaluation_id: str) -> RequiredNote | None:
        for note in self.required_notes:
            if note.evaluation_id == evaluation_id:
                return note
        return None


@dataclass(frozen=True)
class StatusInfo:
    status: ProgressStatus
    label: str
    details: str
