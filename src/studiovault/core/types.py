"""Shared types and data structures for StudioVault."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Record keys that document attributes may never replace
PROTECTED_RECORD_KEYS = frozenset({"path", "name", "isDirectory"})


class ScanStatus(StrEnum):
    """Outcome of a listing or traversal."""

    OK = "ok"
    REJECTED = "rejected"
    IO_ERROR = "io_error"


class FailureReason(StrEnum):
    """Why a mutation did not happen."""

    SECURITY = "security"
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND_OR_IO = "not_found_or_io"
    UNSUPPORTED = "unsupported"


class DocumentAttributes(BaseModel):
    """Front matter of a document.

    The fields the UI relies on are typed; any other document-defined key
    is kept in the extension map (``model_extra``).
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str | None = None
    title: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    created_at: str | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> DocumentAttributes:
        """Build attributes from a parsed header, keeping unknown keys."""
        known: dict[str, Any] = {}
        for key in ("id", "title", "status", "created_at"):
            value = data.get(key)
            if value is not None:
                known[key] = value if isinstance(value, str) else str(value)
        tags = data.get("tags")
        if isinstance(tags, list):
            known["tags"] = [str(tag) for tag in tags]
        elif isinstance(tags, str):
            known["tags"] = [tags] if tags else []
        extra = {k: v for k, v in data.items() if k not in cls.model_fields}
        return cls.model_validate({**extra, **known})

    def as_dict(self) -> dict[str, Any]:
        """All attributes present in the header, known fields first."""
        return self.model_dump(exclude_none=True)


class EntryMetadata(BaseModel):
    """Snapshot of one filesystem node inside the vault."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    is_directory: bool
    size: int | None = None
    last_modified: datetime | None = None
    created_at: datetime | None = None
    attributes: DocumentAttributes = Field(default_factory=DocumentAttributes)

    @property
    def created_timestamp(self) -> float:
        """Creation time as epoch seconds, 0 when unknown."""
        if self.created_at is None:
            return 0.0
        return self.created_at.timestamp()

    def to_record(self) -> dict[str, Any]:
        """Flat camelCase mapping with attributes merged on top."""
        record: dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "isDirectory": self.is_directory,
            "size": self.size,
            "lastModified": (
                self.last_modified.isoformat() if self.last_modified else None
            ),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        for key, value in self.attributes.as_dict().items():
            if key in PROTECTED_RECORD_KEYS:
                continue
            record[key] = value
        return record


@dataclass(frozen=True)
class ScanResult:
    """Entries plus the reason an empty listing is empty."""

    entries: list[EntryMetadata] = field(default_factory=list)
    status: ScanStatus = ScanStatus.OK

    @property
    def ok(self) -> bool:
        return self.status is ScanStatus.OK

    @classmethod
    def rejected(cls) -> ScanResult:
        return cls(entries=[], status=ScanStatus.REJECTED)

    @classmethod
    def io_error(cls) -> ScanResult:
        return cls(entries=[], status=ScanStatus.IO_ERROR)


class OperationResult(BaseModel):
    """Tagged success/failure returned by create-style operations."""

    success: bool
    path: str | None = None
    error: str | None = None
    reason: FailureReason | None = None

    @classmethod
    def ok(cls, path: str | None = None) -> OperationResult:
        return cls(success=True, path=path)

    @classmethod
    def fail(cls, reason: FailureReason, error: str) -> OperationResult:
        return cls(success=False, error=error, reason=reason)


class InitialState(BaseModel):
    """Root path and top-level entries returned on startup."""

    root_path: str
    entries: list[EntryMetadata] = Field(default_factory=list)
