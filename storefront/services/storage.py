from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from storefront.core.errors import PersistenceError

logger = logging.getLogger(__name__)

class JsonCollectionFile:
    """
    One JSON file holding a whole collection as a top-level array.
    Writes go through a temp file + os.replace so readers never see half a file.

    A sidecar "<file>.seq" remembers the last id handed out, so deleting the
    newest record and restarting does not make its id available again.
    """
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.seq_path = self.path.with_name(self.path.name + ".seq")

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                logger.info("initializing empty collection file %s", self.path)
                self._write_json(self.path, [])
        except OSError as exc:
            logger.error("could not initialize %s: %s", self.path, exc)
            raise PersistenceError(f"Could not initialize {self.path}: {exc}", str(self.path)) from exc

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Dict[str, Any]]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("could not read %s: %s", self.path, exc)
            raise PersistenceError(f"Could not read {self.path}: {exc}", str(self.path)) from exc

        if not isinstance(data, list):
            raise PersistenceError(f"{self.path} does not contain a JSON array", str(self.path))
        return data

    def save(self, records: List[Dict[str, Any]]) -> None:
        try:
            self._write_json(self.path, records)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("could not write %s: %s", self.path, exc)
            raise PersistenceError(f"Could not write {self.path}: {exc}", str(self.path)) from exc

    # ---------- id sequence ----------
    def load_last_id(self) -> int:
        if not self.seq_path.exists():
            return 0
        try:
            with self.seq_path.open("r", encoding="utf-8") as f:
                return int(json.load(f).get("last_id", 0))
        except (OSError, ValueError, AttributeError) as exc:
            # the collection itself still seeds the counter
            logger.warning("ignoring unreadable sequence file %s: %s", self.seq_path, exc)
            return 0

    def save_last_id(self, last_id: int) -> None:
        try:
            self._write_json(self.seq_path, {"last_id": last_id})
        except OSError as exc:
            logger.error("could not write %s: %s", self.seq_path, exc)
            raise PersistenceError(f"Could not write {self.seq_path}: {exc}", str(self.seq_path)) from exc

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        finally:
            if tmp.exists():
                tmp.unlink()
