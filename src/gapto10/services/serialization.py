"""JSON shape of subjects and config, as stored and exported.

Field names follow the stored camelCase keys. Structural checks live here so
the calculation code can assume well-formed input.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from gapto10.config.defaults import ConfigError, config_to_dict, normalize_config, validate_config
from gapto10.core.models import (
    AnyEvaluation,
    Config,
    Evaluation,
    RoundingType,
    Section,
    SubEvaluation,
    Subject,
    SummativeEvaluation,
)

logger = logging.getLogger(__name__)


class ImportDataError(ValueError):
    pass


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class SubEvaluationPayload(_Payload):
    id: str
    name: str
    date: Optional[str] = None
    weight: float = Field(ge=0)
    max_points: float = Field(alias="maxPoints", gt=0)
    obtained_points: Optional[float] = Field(default=None, alias="obtainedPoints", ge=0)

    @model_validator(mode="after")
    def _score_within_scale(self) -> "SubEvaluationPayload":
        if self.obtained_points is not None and self.obtained_points > self.max_points:
            raise ValueError(f"obtainedPoints of {self.name} exceeds maxPoints")
        return self

    def to_domain(self) -> SubEvaluation:
        return SubEvaluation(
            id=self.id,
            name=self.name,
            weight=self.weight,
            max_points=self.max_points,
            obtained_points=self.obtained_points,
            date=self.date,
        )

    @classmethod
    def from_domain(cls, child: SubEvaluation) -> "SubEvaluationPayload":
        return cls(
            id=child.id,
            name=child.name,
            date=child.date,
            weight=child.weight,
            max_points=child.max_points,
            obtained_points=child.obtained_points,
        )


class EvaluationPayload(SubEvaluationPayload):
    section: Optional[Section] = None
    is_summative: Optional[bool] = Field(default=None, alias="isSummative")
    sub_evaluations: Optional[List[SubEvaluationPayload]] = Field(default=None, alias="subEvaluations")

    @model_validator(mode="after")
    def _children_only_when_summative(self) -> "EvaluationPayload":
        if self.sub_evaluations and not self.is_summative:
            raise ValueError(f"{self.name} has subEvaluations but is not summative")
        return self

    def to_domain(self) -> AnyEvaluation:
        # a summative flag without children is scored directly
        if self.is_summative and self.sub_evaluations:
            return SummativeEvaluation(
                id=self.id,
                name=self.name,
                weight=self.weight,
                max_points=self.max_points,
                sub_evaluations=[child.to_domain() for child in self.sub_evaluations or []],
                date=self.date,
                section=self.section,
            )
        return Evaluation(
            id=self.id,
            name=self.name,
            weight=self.weight,
            max_points=self.max_points,
            obtained_points=self.obtained_points,
            date=self.date,
            section=self.section,
        )

    @classmethod
    def from_domain(cls, evaluation: AnyEvaluation) -> "EvaluationPayload":
        if isinstance(evaluation, SummativeEvaluation):
            return cls(
                id=evaluation.id,
                name=evaluation.name,
                date=evaluation.date,
                weight=evaluation.weight,
                max_points=evaluation.max_points,
                section=evaluation.section,
                is_summative=True,
                sub_evaluations=[SubEvaluationPayload.from_domain(c) for c in evaluation.sub_evaluations],
            )
        return cls(
            id=evaluation.id,
            name=evaluation.name,
            date=evaluation.date,
            weight=evaluation.weight,
            max_points=evaluation.max_points,
            obtained_points=evaluation.obtained_points,
            section=evaluation.section,
        )


class SubjectPayload(_Payload):
    id: str
    name: str
    has_split: bool = Field(default=False, alias="hasSplit")
    theory_weight: Optional[float] = Field(default=None, alias="theoryWeight", ge=0)
    practice_weight: Optional[float] = Field(default=None, alias="practiceWeight", ge=0)
    evaluations: List[EvaluationPayload] = Field(default_factory=list)

    def to_domain(self) -> Subject:
        return Subject(
            id=self.id,
            name=self.name,
            has_split=self.has_split,
            theory_weight=self.theory_weight,
            practice_weight=self.practice_weight,
            evaluations=[e.to_domain() for e in self.evaluations],
        )

    @classmethod
    def from_domain(cls, subject: Subject) -> "SubjectPayload":
        return cls(
            id=subject.id,
            name=subject.name,
            has_split=subject.has_split,
            theory_weight=subject.theory_weight,
            practice_weight=subject.practice_weight,
            evaluations=[EvaluationPayload.from_domain(e) for e in subject.evaluations],
        )


class ConfigPayload(_Payload):
    default_max_points: Optional[float] = Field(default=None, alias="defaultMaxPoints")
    percentage_per_point: Optional[float] = Field(default=None, alias="percentagePerPoint")
    passing_percentage: Optional[float] = Field(default=None, alias="passingPercentage")
    rounding_type: Optional[RoundingType] = Field(default=None, alias="roundingType")
    show_json_in_export_import: Optional[bool] = Field(default=None, alias="showJsonInExportImport")

    def to_domain(self) -> Config:
        return validate_config(normalize_config(_dump(self)))


class ExportEnvelope(_Payload):
    subjects: List[SubjectPayload] = Field(default_factory=list)
    config: Optional[ConfigPayload] = None
    export_date: Optional[str] = Field(default=None, alias="exportDate")


@dataclass
class ImportedData:
    subjects: list[Subject] = field(default_factory=list)
    config: Config | None = None
    export_date: str | None = None


def _dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def subject_to_dict(subject: Subject) -> dict:
    return _dump(SubjectPayload.from_domain(subject))


def subject_from_dict(data: Mapping[str, Any]) -> Subject:
    try:
        return SubjectPayload.model_validate(data).to_domain()
    except ValidationError as exc:
        raise ImportDataError(f"Invalid subject: {exc}") from exc


def build_envelope(subjects: list[Subject], config: Config, export_date: str | None = None) -> dict:
    envelope = ExportEnvelope(
        subjects=[SubjectPayload.from_domain(s) for s in subjects],
        config=ConfigPayload.model_validate(config_to_dict(config)),
        export_date=export_date,
    )
    return _dump(envelope)


def dump_envelope(subjects: list[Subject], config: Config, export_date: str | None = None) -> str:
    if export_date is None:
        export_date = datetime.now(timezone.utc).isoformat()
    return json.dumps(build_envelope(subjects, config, export_date), indent=2, ensure_ascii=False)


def load_envelope(data: Union[str, bytes, Mapping[str, Any]]) -> ImportedData:
    """Parse an exported document into domain objects.

    Raises ImportDataError when the document is not valid JSON or does not
    have the expected shape.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ImportDataError(f"Invalid JSON: {exc.msg}") from exc
    if not isinstance(data, Mapping) or not isinstance(data.get("subjects"), list):
        raise ImportDataError("Expected an object with a 'subjects' list")

    try:
        envelope = ExportEnvelope.model_validate(data)
        config = envelope.config.to_domain() if envelope.config is not None else None
    except (ValidationError, ConfigError) as exc:
        raise ImportDataError(str(exc)) from exc

    subjects = [s.to_domain() for s in envelope.subjects]
    logger.info("Loaded %d subjects (exported %s)", len(subjects), envelope.export_date or "unknown")
    return ImportedData(subjects=subjects, config=config, export_date=envelope.export_date)


def export_filename(day: date | None = None) -> str:
    day = day or datetime.now(timezone.utc).date()
    return f"notas-{day.isoformat()}.json"
