# agendas/db.py
import copy
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .settings import Settings

logger = logging.getLogger(__name__)

@dataclass
class StoreResult:
    success: bool
    message: Optional[str] = None

class JsonFileStore:
    """One JSON array per entity, read and rewritten as a whole.

    The file (and its directory) is created on first access, seeded with ``[]``.
    """

    def __init__(self, path: str):
        self.path = path

    def _ensure(self):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        if not os.path.exists(self.path):
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([], f, indent=2)

    def load_all(self) -> list[dict]:
        try:
            self._ensure()
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Lecture impossible de {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.error(f"{self.path} ne contient pas un tableau JSON")
            return []
        return data

    def persist_all(self, records: list[dict]) -> StoreResult:
        try:
            self._ensure()
            folder = os.path.dirname(os.path.abspath(self.path))
            # temp file + replace: the target is either fully rewritten or untouched
            fd, tmp = tempfile.mkstemp(dir=folder, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Écriture impossible de {self.path}: {e}")
            return StoreResult(False, "Erreur lors de l'écriture des données")
        return StoreResult(True)

class MemoryStore:
    """Same contract as JsonFileStore, kept in memory (tests, scratch setups)."""

    def __init__(self, records: Optional[list[dict]] = None, fail_writes: bool = False):
        self.records = copy.deepcopy(records or [])
        self.fail_writes = fail_writes
        self.writes = 0

    def load_all(self) -> list[dict]:
        return copy.deepcopy(self.records)

    def persist_all(self, records: list[dict]) -> StoreResult:
        if self.fail_writes:
            return StoreResult(False, "Erreur lors de l'écriture des données")
        self.records = copy.deepcopy(records)
        self.writes += 1
        return StoreResult(True)

@dataclass
class Stores:
    users: object
    clients: object
    appointments: object
    messages: object

def open_stores(settings: Settings) -> Stores:
    def _file(name: str) -> JsonFileStore:
        return JsonFileStore(os.path.join(settings.data_dir, f"{name}.json"))
    return Stores(
        users=_file("users"),
        clients=_file("clients"),
        appointments=_file("appointments"),
        messages=_file("messages"),
    )
