from __future__ import annotations
import copy
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from anyio import to_thread
from pydantic import BaseModel, ValidationError as PydanticValidationError

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.common import EntityKind, required_fields
from storefront.services.storage import JsonCollectionFile

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

@dataclass(frozen=True)
class EntitySchema:
    """What a record of one kind must look like."""
    kind: EntityKind
    model: Type[BaseModel]
    # Fields whose values must not repeat across records (e.g. product "code")
    unique_fields: Tuple[str, ...] = ()

    @property
    def entity(self) -> str:
        return self.kind.singular

    @property
    def required(self) -> List[str]:
        return [f for f in required_fields(self.model) if f != "id"]


class EntityStore:
    """
    Ordered collection of records of one kind, persisted wholesale to a JSON file.

    Rules:
    - ids are assigned here, never by the caller, from a running counter that
      survives deletes and restarts (see JsonCollectionFile.seq_path).
    - every mutation rewrites the whole file; memory is only updated once the
      write succeeded, so a failed write leaves the collection as it was.
    - returned records are copies.
    """

    def __init__(self, path: str | Path, schema: EntitySchema, reload_on_read: bool = False):
        self.schema = schema
        self.file = JsonCollectionFile(path)
        self.reload_on_read = reload_on_read

        self._lock = threading.RLock()
        self._records: List[Record] = []
        self._last_id = 0

        self.file.ensure()
        self._load()
        logger.info("loaded %d %s from %s", len(self._records), schema.kind.value, self.file.path)

    # ---------- reads ----------
    def list(self, limit: Optional[int] = None) -> List[Record]:
        if limit is not None and limit < 1:
            raise ValidationError("limit must be a positive integer", details={"limit": limit})
        with self._lock:
            self._refresh()
            records = self._records if limit is None else self._records[:limit]
            return copy.deepcopy(records)

    def get_by_id(self, record_id: int) -> Record:
        with self._lock:
            self._refresh()
            return copy.deepcopy(self._records[self._index_of(record_id)])

    def __len__(self) -> int:
        with self._lock:
            self._refresh()
            return len(self._records)

    # ---------- writes ----------
    def create(self, fields: Mapping[str, Any]) -> Record:
        return self.create_many(fields)[0]

    def create_many(self, *items: Mapping[str, Any]) -> List[Record]:
        """Validate every item first, then append them all with a single write."""
        with self._lock:
            self._refresh()
            records = list(self._records)
            last_id = self._last_id
            created = []
            for fields in items:
                record = self._build(fields)
                self._check_unique(record, records)
                last_id += 1
                new = {"id": last_id, **record}
                records.append(new)
                created.append(new)

            if created:
                self._commit(records, last_id)
                logger.info("created %s %s", self.schema.entity, ", ".join(str(r["id"]) for r in created))
            return copy.deepcopy(created)

    def update(self, record_id: int, fields: Mapping[str, Any]) -> Record:
        return self.apply(record_id, lambda current: {**current, **fields})

    def apply(self, record_id: int, change: Callable[[Record], Mapping[str, Any]]) -> Record:
        """
        Read-modify-write one record under the store lock. `change` receives a
        copy of the current record and returns its new fields; `id` stays put.
        """
        with self._lock:
            self._refresh()
            index = self._index_of(record_id)
            record = self._build(change(copy.deepcopy(self._records[index])))
            self._check_unique(record, self._records, skip_id=record_id)

            updated = {"id": record_id, **record}
            records = list(self._records)
            records[index] = updated
            self._commit(records, self._last_id)
            logger.info("updated %s %s", self.schema.entity, record_id)
            return copy.deepcopy(updated)

    def delete(self, record_id: int) -> Record:
        with self._lock:
            self._refresh()
            index = self._index_of(record_id)
            records = list(self._records)
            removed = records.pop(index)
            self._commit(records, self._last_id)
            logger.info("deleted %s %s", self.schema.entity, record_id)
            return removed

    # ---------- internals ----------
    def _load(self) -> None:
        records = self.file.load()
        self._records = records
        saved = self.file.load_last_id()
        self._last_id = max(self._last_id, saved, _max_id(records))
        if self._last_id > saved:
            # file written without a sidecar, or edited by hand
            self.file.save_last_id(self._last_id)

    def _refresh(self) -> None:
        if not self.reload_on_read:
            return
        if not self.file.exists():
            # someone removed the file: that reads as an empty collection
            self.file.ensure()
            self._records = []
            return
        self._load()

    def _index_of(self, record_id: int) -> int:
        for i, r in enumerate(self._records):
            if r.get("id") == record_id:
                return i
        raise NotFoundError(self.schema.entity, record_id)

    def _build(self, fields: Mapping[str, Any]) -> Record:
        data = {k: v for k, v in fields.items() if k != "id"}
        missing = [f for f in self.schema.required if data.get(f) is None]
        if missing:
            raise ValidationError.missing_fields(self.schema.entity, missing)
        try:
            return self.schema.model.model_validate(data).model_dump(mode="json")
        except PydanticValidationError as exc:
            errors = [
                {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
                for e in exc.errors()
            ]
            raise ValidationError(f"Invalid {self.schema.entity}", details={"errors": errors}) from exc

    def _check_unique(self, record: Record, records: Iterable[Record], skip_id: Optional[int] = None) -> None:
        for field in self.schema.unique_fields:
            value = record.get(field)
            if any(r.get("id") != skip_id and r.get(field) == value for r in records):
                raise ValidationError(
                    f"{self.schema.entity} with {field} {value!r} already exists",
                    details={"field": field, "value": value},
                )

    def _commit(self, records: List[Record], last_id: int) -> None:
        if last_id != self._last_id:
            self.file.save_last_id(last_id)
            self._last_id = last_id
        self.file.save(records)
        self._records = records


def _max_id(records: Iterable[Record]) -> int:
    return max((r["id"] for r in records if isinstance(r.get("id"), int)), default=0)


class AsyncEntityStore:
    """
    Coroutine front for an EntityStore. File I/O runs in a worker thread;
    overlapping calls are serialized by the wrapped store's lock.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    @property
    def schema(self) -> EntitySchema:
        return self.store.schema

    async def list(self, limit: Optional[int] = None) -> List[Record]:
        return await to_thread.run_sync(self.store.list, limit)

    async def get_by_id(self, record_id: int) -> Record:
        return await to_thread.run_sync(self.store.get_by_id, record_id)

    async def create(self, fields: Mapping[str, Any]) -> Record:
        return await to_thread.run_sync(self.store.create, fields)

    async def create_many(self, *items: Mapping[str, Any]) -> List[Record]:
        return await to_thread.run_sync(self.store.create_many, *items)

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> Record:
        return await to_thread.run_sync(self.store.update, record_id, fields)

    async def delete(self, record_id: int) -> Record:
        return await to_thread.run_sync(self.store.delete, record_id)
