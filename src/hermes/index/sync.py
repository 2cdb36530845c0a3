"""Synchronisation passes: plan, ensure schema, apply in one transaction."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Sequence

from hermes.config import AppConfig
from hermes.index.planner import plan_sync
from hermes.index.storage import SQLiteIndexStore
from hermes.models import Operation, SyncResult

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _IndexState:
    lock: threading.Lock = field(default_factory=threading.Lock)
    issued: int = 0
    committed: int = 0
    active: int = 0


class IndexSynchronizer:
    """Keeps each workspace index in line with the latest page snapshot.

    Passes for the same index run one at a time. Every pass is numbered when
    its snapshot is taken; once a newer pass has committed, older ones still
    waiting on the lock are dropped instead of overwriting it. An index with
    no pass in flight holds no state here.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._registry_lock = threading.Lock()
        self._states: Dict[Path, _IndexState] = {}

    def _begin(self, index_path: Path) -> tuple[_IndexState, int]:
        key = index_path.resolve()
        with self._registry_lock:
            state = self._states.setdefault(key, _IndexState())
            state.issued += 1
            state.active += 1
            return state, state.issued

    def _finish(self, index_path: Path, state: _IndexState) -> None:
        key = index_path.resolve()
        with self._registry_lock:
            state.active -= 1
            if state.active <= 0 and self._states.get(key) is state:
                del self._states[key]

    def sync(self, root: Path, pages: Mapping[str, str], *, now: int | None = None) -> SyncResult:
        """Run one pass. Never raises: failures come back as a result."""
        root = Path(root)
        index_path = self.config.index_path(root)
        state, generation = self._begin(index_path)
        try:
            return self._sync_pass(root, pages, index_path, state, generation, now)
        finally:
            self._finish(index_path, state)

    def _sync_pass(
        self,
        root: Path,
        pages: Mapping[str, str],
        index_path: Path,
        state: _IndexState,
        generation: int,
        now: int | None,
    ) -> SyncResult:
        operations = plan_sync(
            root,
            dict(pages),
            slot_keys=self.config.slot_keys,
            now=now,
            title_max_chars=self.config.title_max_chars,
        )

        with state.lock:
            if generation < state.committed:
                LOGGER.debug(
                    "Dropping stale index pass %d for %s (pass %d already committed)",
                    generation,
                    index_path,
                    state.committed,
                )
                return SyncResult("stale", index_path, operations=len(operations))
            try:
                self._run(index_path, operations)
            except Exception as exc:
                return SyncResult("failed", index_path, error=str(exc), operations=len(operations))
            state.committed = generation

        LOGGER.debug("Synchronised %d operations into %s", len(operations), index_path)
        return SyncResult("ok", index_path, operations=len(operations))

    def _run(self, index_path: Path, operations: Sequence[Operation]) -> None:
        store = SQLiteIndexStore(index_path)
        try:
            store.apply(operations)
        finally:
            store.close()
