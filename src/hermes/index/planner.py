"""Compute the index changes for one synchronisation pass.

Planning is a pure function of the page snapshot: it never touches the
database, so the same snapshot always yields the same operations (apart
from the shared timestamp).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable, List, Mapping

from hermes.models import DeleteSlot, DocumentRecord, Operation, PruneSlots, UpsertSlot
from hermes.utils.files import iter_slot_paths
from hermes.utils.text import (
    DEFAULT_TITLE_MAX_CHARS,
    char_count,
    extract_title,
    is_blank,
    word_count,
)


def build_record(
    slot_key: str,
    location: Path,
    content: str,
    *,
    updated_at: int,
    title_max_chars: int = DEFAULT_TITLE_MAX_CHARS,
) -> DocumentRecord:
    return DocumentRecord(
        slot_key=slot_key,
        location=str(location),
        title=extract_title(content, max_chars=title_max_chars),
        body=content,
        word_count=word_count(content),
        char_count=char_count(content),
        updated_at=updated_at,
    )


def plan_sync(
    root: Path,
    pages: Mapping[str, str],
    *,
    slot_keys: Iterable[str],
    now: int | None = None,
    title_max_chars: int = DEFAULT_TITLE_MAX_CHARS,
) -> List[Operation]:
    """Return the operations that make the index mirror ``pages``.

    Slots missing from ``pages`` count as blank. The list opens with a
    prune of keys outside ``slot_keys`` and then holds exactly one delete
    or upsert per slot, in slot order.
    """
    keys = tuple(slot_keys)
    updated_at = int(time.time()) if now is None else int(now)

    operations: List[Operation] = [PruneSlots(keep=keys)]
    for key, location in iter_slot_paths(root, keys):
        content = pages.get(key) or ""
        if is_blank(content):
            operations.append(DeleteSlot(slot_key=key))
            continue
        record = build_record(
            key,
            location,
            content,
            updated_at=updated_at,
            title_max_chars=title_max_chars,
        )
        operations.append(UpsertSlot(record=record))
    return operations
