from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StoragePort(Protocol):
    def load(self) -> dict[str, Any] | None: ...

    def save(self, document: dict[str, Any]) -> None: ...


class MemoryStorage:
    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self.document = document

    def load(self) -> dict[str, Any] | None:
        return json.loads(json.dumps(self.document)) if self.document is not None else None

    def save(self, document: dict[str, Any]) -> None:
        self.document = json.loads(json.dumps(document))


class JsonFileStorage:
    """Whole-document JSON file, replaced atomically on every save."""

    def __init__(self, path: str = "gapto10.json") -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            logger.info("No data file at %s, starting empty", self.path)
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return document

    def save(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc
        logger.info("Saved data to %s", self.path)
