"""Workspace facade: file operations first, then a best-effort index pass."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from hermes.config import AppConfig
from hermes.index.sync import IndexSynchronizer
from hermes.models import ContentStoreError, LoadResult, SyncResult, normalize_pages
from hermes.workspace.store import ContentStore

LOGGER = logging.getLogger(__name__)


def _discard_sync_result(result: SyncResult) -> None:
    """Drop a pass result on the floor, leaving a trace in the log."""
    if result.status == "failed":
        LOGGER.warning("[workspace-index] %s: %s", result.index_path, result.error)
    elif result.status == "stale":
        LOGGER.debug("[workspace-index] superseded pass skipped for %s", result.index_path)


class Workspace:
    """Entry point used by the CLI and web app for one or more workspace roots."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        store: ContentStore | None = None,
        synchronizer: IndexSynchronizer | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.store = store or ContentStore(self.config)
        self.synchronizer = synchronizer or IndexSynchronizer(self.config)

    def load_pages(self, root: Path) -> LoadResult:
        result = self.store.load(root)
        _discard_sync_result(self.synchronizer.sync(root, result.pages))
        return result

    def save_pages(self, root: Path, pages: Mapping[str, Any]) -> Dict[str, str]:
        """Persist ``pages`` and refresh the index.

        Returns the normalised snapshot that was written. A write failure
        propagates as ``ContentStoreError``; before that, the index is
        re-synced from whatever actually made it to disk.
        """
        snapshot = normalize_pages(pages, self.config.slot_keys)
        try:
            self.store.save(root, snapshot)
        except ContentStoreError:
            on_disk = self.store.load(root)
            _discard_sync_result(self.synchronizer.sync(root, on_disk.pages))
            raise
        _discard_sync_result(self.synchronizer.sync(root, snapshot))
        return snapshot

    def reindex(self, root: Path) -> SyncResult:
        """Rebuild the index from the files on disk and report how it went."""
        result = self.store.load(root)
        return self.synchronizer.sync(root, result.pages)

    def load_chat(self, root: Path) -> List[Any]:
        return self.store.load_chat(root)

    def save_chat(self, root: Path, messages: List[Any]) -> None:
        self.store.save_chat(root, messages)

    def list_projects(self, root: Path) -> list[str]:
        return self.store.list_projects(root)
