"""Markdown files on disk: the source of truth for every slot."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping

from hermes.config import AppConfig
from hermes.models import ContentStoreError, LoadResult
from hermes.utils.files import iter_slot_paths, list_visible_dirs
from hermes.utils.text import is_blank

LOGGER = logging.getLogger(__name__)


class ContentStore:
    """Reads and writes one ``{slot}.md`` file per slot under a workspace root."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()

    def load(self, root: Path) -> LoadResult:
        result = LoadResult()
        root = Path(root)
        if not root.exists():
            return result

        for key, path in iter_slot_paths(root, self.config.slot_keys):
            if not path.exists():
                continue
            try:
                result.pages[key] = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                message = f"Failed reading {path}: {exc}"
                LOGGER.error(message)
                result.errors[key] = message
        return result

    def save(self, root: Path, pages: Mapping[str, str]) -> None:
        """Write every non-blank slot and delete the files of blank ones.

        Raises:
            ContentStoreError: on the first file that cannot be written or
                removed. Slots after it are left untouched.
        """
        root = Path(root)
        for key, path in iter_slot_paths(root, self.config.slot_keys):
            content = pages.get(key) or ""
            if is_blank(content):
                if path.exists():
                    try:
                        path.unlink()
                    except OSError as exc:
                        raise ContentStoreError(f"Failed removing {path}: {exc}", path) from exc
                continue

            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ContentStoreError(
                    f"Failed creating workspace directory {root}: {exc}", root
                ) from exc
            try:
                path.write_text(content, encoding="utf-8", newline="")
            except OSError as exc:
                raise ContentStoreError(f"Failed writing {path}: {exc}", path) from exc

    def load_chat(self, root: Path) -> List[Any]:
        path = self.config.chat_path(root)
        if not path.exists():
            return []
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ContentStoreError(f"Failed reading {path}: {exc}", path) from exc
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Ignoring malformed chat history in %s", path)
            return []
        return parsed if isinstance(parsed, list) else []

    def save_chat(self, root: Path, messages: List[Any]) -> None:
        path = self.config.chat_path(root)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(messages, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise ContentStoreError(f"Failed writing {path}: {exc}", path) from exc

    def list_projects(self, root: Path) -> list[str]:
        try:
            return list_visible_dirs(root)
        except OSError as exc:
            raise ContentStoreError(f"Failed reading workspace directory {root}: {exc}", root) from exc
