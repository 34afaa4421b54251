"""
Domain errors raised by the stores and services.

The API layer maps them to status codes:
- ValidationError  -> 400
- NotFoundError    -> 404
- PersistenceError -> 500
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional


class StoreError(Exception):
    """Base class for everything the storage layer raises on purpose."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StoreError):
    def __init__(self, message: str, missing: Optional[List[str]] = None, details: Optional[Dict[str, Any]] = None):
        self.missing = list(missing or [])
        details = dict(details or {})
        if self.missing:
            details.setdefault("missing", self.missing)
        super().__init__(message, details)

    @classmethod
    def missing_fields(cls, entity: str, missing: List[str]) -> "ValidationError":
        return cls(f"Missing required fields for {entity}: {', '.join(missing)}", missing=missing)


class NotFoundError(StoreError):
    def __init__(self, entity: str, record_id: Any):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found", {"entity": entity, "id": record_id})


class PersistenceError(StoreError):
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message, {"path": path} if path else None)
