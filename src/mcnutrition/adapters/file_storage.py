"""Persistent client storage backed by a JSON file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from mcnutrition.services.storage import ClientStorage

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage(ClientStorage):
    """Key-value storage that survives restarts, like browser local storage."""

    path: Path

    def get(self, key: str) -> object | None:
        return self._read().get(key)

    def set(self, key: str, value: object) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read()
        if values.pop(key, None) is not None:
            self._write(values)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _logger.warning("Ignoring corrupt client storage at %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values), encoding="utf-8")
        tmp_path.replace(self.path)
