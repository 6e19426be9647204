from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping

from .models import Translation

LOGGER = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """The dictionary artifact could not be read or written."""


class DictionaryStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, Translation]:
        if not self.path.exists():
            LOGGER.info("No dictionary at %s; starting empty", self.path)
            return {}
        try:
            with open(self.path, "rt", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read dictionary {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Dictionary {self.path} is not a JSON object")
        return {str(key): Translation.from_value(value) for key, value in data.items()}

    def save(self, entries: Mapping[str, Translation]) -> Path:
        payload = {key: translation.to_json() for key, translation in entries.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
        except OSError as exc:
            raise PersistenceError(f"Cannot write dictionary {self.path}: {exc}") from exc
        tmp_path = Path(tmp_name)
        try:
            with open(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write dictionary {self.path}: {exc}") from exc
        LOGGER.debug("Saved %s entries to %s", len(payload), self.path)
        return self.path
