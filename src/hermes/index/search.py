"""Full-text search and recency listing over the page index."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from hermes.index.storage import SQLiteIndexStore
from hermes.models import DocumentRecord

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def build_fts_query(query: str) -> str | None:
    """Turn free text into OR-joined quoted prefix terms. Returns None if empty.

    'meeting notes' -> '"meeting"* OR "notes"*'. Quoting keeps FTS5 operators
    in the user's text from being interpreted.
    """
    terms = _TOKEN_RE.findall(query.lower())
    if not terms:
        return None
    return " OR ".join(f'"{term}"*' for term in terms)


@dataclass(slots=True)
class SearchResult:
    slot_key: str
    title: str
    snippet: str
    location: str
    updated_at: int
    score: float


class Searcher:
    """High-level API to query the page index."""

    def __init__(self, store: SQLiteIndexStore) -> None:
        self.store = store

    def search(self, query: str, *, top_k: int = 10) -> List[SearchResult]:
        fts_query = build_fts_query(query)
        if fts_query is None:
            return []
        rows = self.store.search(fts_query, top_k=top_k)
        results: List[SearchResult] = []
        for row in rows:
            results.append(
                SearchResult(
                    slot_key=row["slot_key"],
                    title=row["title"],
                    snippet=row["snippet"],
                    location=row["location"],
                    updated_at=int(row["updated_at"]),
                    # bm25 is lower-is-better; flip it so higher means more relevant
                    score=-float(row["score"]),
                )
            )
        return results

    def recent(self, *, limit: int | None = None) -> List[DocumentRecord]:
        return self.store.list_documents(limit=limit)
