"""Core Hermes data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Mapping, Union


class ContentStoreError(OSError):
    """A slot file, or the workspace folder, could not be written or removed."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = Path(path)


class IndexSyncError(RuntimeError):
    """The search index at ``index_path`` could not be brought up to date."""

    def __init__(self, message: str, index_path: Path) -> None:
        super().__init__(message)
        self.index_path = Path(index_path)


@dataclass(slots=True)
class DocumentRecord:
    """Summary row describing one slot's saved content."""

    slot_key: str
    location: str
    title: str
    body: str
    word_count: int
    char_count: int
    updated_at: int


@dataclass(frozen=True, slots=True)
class DeleteSlot:
    slot_key: str


@dataclass(frozen=True, slots=True)
class UpsertSlot:
    record: DocumentRecord

    @property
    def slot_key(self) -> str:
        return self.record.slot_key


@dataclass(frozen=True, slots=True)
class PruneSlots:
    """Drop rows for keys that are no longer part of the slot set."""

    keep: tuple[str, ...]


Operation = Union[DeleteSlot, UpsertSlot, PruneSlots]


@dataclass(slots=True)
class LoadResult:
    pages: Dict[str, str] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class SyncResult:
    """Outcome of one synchronisation pass.

    Callers of load/save never act on this; it exists so the failure can be
    logged where it is dropped.
    """

    status: Literal["ok", "failed", "stale"]
    index_path: Path
    error: str | None = None
    operations: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def normalize_pages(raw: Mapping[str, Any] | None, slot_keys: Iterable[str]) -> Dict[str, str]:
    """Map every slot key to a string, dropping unknown keys."""
    pages = {key: "" for key in slot_keys}
    if not isinstance(raw, Mapping):
        return pages
    for key in pages:
        value = raw.get(key)
        pages[key] = value if isinstance(value, str) else ""
    return pages
