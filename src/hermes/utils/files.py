"""Utility helpers for working with workspace files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator


def iter_slot_paths(root: Path, slot_keys: Iterable[str]) -> Iterator[tuple[str, Path]]:
    """Yield ``(slot_key, path)`` for every slot, in slot order."""
    for key in slot_keys:
        yield key, Path(root) / f"{key}.md"


def list_visible_dirs(root: Path) -> list[str]:
    """Return sorted names of the non-hidden subdirectories of ``root``."""
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(
        child.name
        for child in root.iterdir()
        if child.is_dir() and not child.name.startswith(".")
    )
