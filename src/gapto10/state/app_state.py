from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from gapto10.config.defaults import DEFAULT_CONFIG, ConfigError, config_to_dict, normalize_config, validate_config
from gapto10.core.models import (
    AnyEvaluation,
    CalculationResult,
    Config,
    Leaf,
    Subject,
    SummativeEvaluation,
)
from gapto10.core.projections import calculate_required_notes
from gapto10.services.serialization import (
    ImportedData,
    dump_envelope,
    load_envelope,
    subject_from_dict,
    subject_to_dict,
)
from gapto10.config.settings import settings
from gapto10.services.storage import JsonFileStorage, MemoryStorage, StoragePort

logger = logging.getLogger(__name__)


class AppStateError(Exception):
    pass


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class AppState:
    """Subjects, config and dashboard order, saved through ``storage`` on every change."""

    storage: StoragePort = field(default_factory=MemoryStorage)
    subjects: list[Subject] = field(default_factory=list)
    config: Config = DEFAULT_CONFIG
    subject_order: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, storage: StoragePort) -> "AppState":
        document = storage.load() or {}
        try:
            config = validate_config(normalize_config(document.get("config")))
        except ConfigError as exc:
            raise AppStateError(f"Stored config is invalid: {exc}") from exc
        state = cls(
            storage=storage,
            subjects=[subject_from_dict(item) for item in document.get("subjects", [])],
            config=config,
            subject_order=list(document.get("subjectsOrder", [])),
        )
        logger.info("Loaded %d subjects", len(state.subjects))
        return state

    def to_document(self) -> dict[str, Any]:
        return {
            "subjects": [subject_to_dict(s) for s in self.subjects],
            "config": config_to_dict(self.config),
            "subjectsOrder": list(self.subject_order),
        }

    def save(self) -> None:
        self.storage.save(self.to_document())

    # subjects

    def get_subject(self, subject_id: str) -> Subject:
        for subject in self.subjects:
            if subject.id == subject_id:
                return subject
        raise AppStateError(f"Unknown subject: {subject_id}")

    def add_subject(
        self,
        name: str,
        *,
        has_split: bool = False,
        theory_weight: float | None = None,
        practice_weight: float | None = None,
    ) -> Subject:
        if not name.strip():
            raise AppStateError("Subject name is required")
        if has_split:
            if theory_weight is None and practice_weight is None:
                raise AppStateError("Split subjects need a theory or practice weight")
            if theory_weight is None:
                theory_weight = 100 - practice_weight
            elif practice_weight is None:
                practice_weight = 100 - theory_weight
        else:
            theory_weight = practice_weight = None
        subject = Subject(
            id=_new_id(),
            name=name.strip(),
            has_split=has_split,
            theory_weight=theory_weight,
            practice_weight=practice_weight,
        )
        self.subjects.append(subject)
        self.save()
        return subject

    def rename_subject(self, subject_id: str, name: str) -> Subject:
        if not name.strip():
            raise AppStateError("Subject name is required")
        subject = self.get_subject(subject_id)
        subject.name = name.strip()
        self.save()
        return subject

    def delete_subject(self, subject_id: str) -> None:
        subject = self.get_subject(subject_id)
        self.subjects.remove(subject)
        self.subject_order = [sid for sid in self.subject_order if sid != subject_id]
        self.save()

    # evaluations

    def add_evaluation(self, subject_id: str, evaluation: AnyEvaluation) -> AnyEvaluation:
        subject = self.get_subject(subject_id)
        self._check_evaluation(subject, evaluation)
        subject.evaluations.append(evaluation)
        self.save()
        return evaluation

    def update_evaluation(self, subject_id: str, evaluation: AnyEvaluation) -> AnyEvaluation:
        subject = self.get_subject(subject_id)
        self._check_evaluation(subject, evaluation)
        for index, existing in enumerate(subject.evaluations):
            if existing.id == evaluation.id:
                subject.evaluations[index] = evaluation
                self.save()
                return evaluation
        raise AppStateError(f"Unknown evaluation: {evaluation.id}")

    def delete_evaluation(self, subject_id: str, evaluation_id: str) -> None:
        subject = self.get_subject(subject_id)
        remaining = [e for e in subject.evaluations if e.id != evaluation_id]
        if len(remaining) == len(subject.evaluations):
            raise AppStateError(f"Unknown evaluation: {evaluation_id}")
        subject.evaluations = remaining
        self.save()

    def record_score(self, subject_id: str, evaluation_id: str, obtained_points: float | None) -> Leaf:
        """Enter, change or clear (``None``) the score of a directly graded item."""
        leaf = self._find_leaf(self.get_subject(subject_id), evaluation_id)
        if obtained_points is not None and not 0 <= obtained_points <= leaf.max_points:
            raise AppStateError(f"Score for {leaf.name} must be between 0 and {leaf.max_points:g}")
        leaf.obtained_points = obtained_points
        self.save()
        return leaf

    @staticmethod
    def _find_leaf(subject: Subject, evaluation_id: str) -> Leaf:
        for evaluation in subject.evaluations:
            if isinstance(evaluation, SummativeEvaluation):
                if evaluation.id == evaluation_id:
                    raise AppStateError(f"{evaluation.name} is scored through its sub-evaluations")
                for child in evaluation.sub_evaluations:
                    if child.id == evaluation_id:
                        return child
            elif evaluation.id == evaluation_id:
                return evaluation
        raise AppStateError(f"Unknown evaluation: {evaluation_id}")

    @staticmethod
    def _check_evaluation(subject: Subject, evaluation: AnyEvaluation) -> None:
        items: list[Union[AnyEvaluation, Leaf]] = [evaluation]
        if isinstance(evaluation, SummativeEvaluation):
            items.extend(evaluation.sub_evaluations)
        for item in items:
            if item.max_points <= 0:
                raise AppStateError(f"{item.name}: maxPoints must be greater than 0")
            if item.weight < 0:
                raise AppStateError(f"{item.name}: weight cannot be negative")
            obtained = getattr(item, "obtained_points", None)
            if obtained is not None and not 0 <= obtained <= item.max_points:
                raise AppStateError(f"{item.name}: score must be between 0 and {item.max_points:g}")
        if subject.has_split and evaluation.section is None:
            raise AppStateError(f"{evaluation.name}: split subjects need a theory or practice section")

    # config

    def update_config(self, config: Config | Mapping[str, Any]) -> Config:
        self.config = validate_config(normalize_config(config))
        self.save()
        return self.config

    # dashboard order

    def ordered_subjects(self) -> list[Subject]:
        """Subjects in the saved order; subjects missing from it go last."""
        by_id = {s.id: s for s in self.subjects}
        ordered = [by_id.pop(sid) for sid in self.subject_order if sid in by_id]
        ordered.extend(by_id.values())
        return ordered

    def sync_order(self) -> list[str]:
        ids = [s.id for s in self.subjects]
        current = [sid for sid in self.subject_order if sid in ids]
        new_ids = [sid for sid in ids if sid not in self.subject_order]
        if new_ids or len(current) != len(ids):
            self.subject_order = current + new_ids
            self.save()
        return self.subject_order

    def reorder_subjects(self, order: list[str]) -> None:
        self.subject_order = list(order)
        self.save()

    # calculations

    def calculate(self, subject_id: str, target_percentage: float | None = None) -> CalculationResult:
        return calculate_required_notes(self.get_subject(subject_id), self.config, target_percentage)

    def calculate_all(self) -> dict[str, CalculationResult]:
        return {s.id: calculate_required_notes(s, self.config) for s in self.ordered_subjects()}

    # import / export

    def export_json(self, export_date: str | None = None) -> str:
        return dump_envelope(self.subjects, self.config, export_date)

    def import_json(self, data: Union[str, bytes, Mapping[str, Any]]) -> ImportedData:
        imported = load_envelope(data)
        self.subjects = imported.subjects
        if imported.config is not None:
            self.config = imported.config
        self.subject_order = []
        self.sync_order()
        self.save()
        logger.info("Imported %d subjects", len(imported.subjects))
        return imported

    def clear(self) -> None:
        self.subjects = []
        self.subject_order = []
        self.config = DEFAULT_CONFIG
        self.save()


def open_app_state(path: str | None = None) -> AppState:
    return AppState.load(JsonFileStorage(path or settings.data_path))
