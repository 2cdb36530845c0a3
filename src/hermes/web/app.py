"""FastAPI application exposing workspace pages, chat and search."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hermes.config import AppConfig, default_workspace
from hermes.index.search import Searcher
from hermes.index.storage import SQLiteIndexStore
from hermes.models import ContentStoreError, IndexSyncError
from hermes.workspace import Workspace

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Hermes Workspace", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_workspace = Workspace()


class SavePagesPayload(BaseModel):
    pages: Dict[str, Any]
    workspace: Path | None = None


class SaveChatPayload(BaseModel):
    messages: List[Any]
    workspace: Path | None = None


class SearchPayload(BaseModel):
    query: str
    workspace: Path | None = None
    top_k: int = 10


def _resolve_workspace(request: Request, workspace: Path | None) -> Path:
    if workspace is None:
        workspace = getattr(request.app.state, "workspace", None)
    config = AppConfig(workspace_path=workspace)
    return config.resolve_workspace(Path.cwd())


def _open_index(root: Path) -> SQLiteIndexStore:
    index_path = _workspace.config.index_path(root)
    if not index_path.exists():
        raise HTTPException(
            status_code=404,
            detail=f"Index not found at {index_path}. Load or save the workspace pages first.",
        )
    try:
        return SQLiteIndexStore(index_path)
    except IndexSyncError as exc:
        LOGGER.error("Unable to open index %s: %s", index_path, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/pages")
async def load_pages(request: Request, workspace: Path | None = None) -> dict[str, Any]:
    root = _resolve_workspace(request, workspace)
    result = await asyncio.to_thread(_workspace.load_pages, root)
    pages = {key: result.pages.get(key, "") for key in _workspace.config.slot_keys}
    return {"workspace": str(root), "pages": pages, "errors": result.errors}


@app.put("/pages")
async def save_pages(request: Request, payload: SavePagesPayload) -> dict[str, Any]:
    root = _resolve_workspace(request, payload.workspace)
    try:
        await asyncio.to_thread(_workspace.save_pages, root, payload.pages)
    except ContentStoreError as exc:
        LOGGER.error("Saving pages failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"status": "ok", "workspace": str(root)}


@app.get("/chat")
async def load_chat(request: Request, workspace: Path | None = None) -> dict[str, Any]:
    root = _resolve_workspace(request, workspace)
    try:
        messages = await asyncio.to_thread(_workspace.load_chat, root)
    except ContentStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"messages": messages}


@app.put("/chat")
async def save_chat(request: Request, payload: SaveChatPayload) -> dict[str, str]:
    root = _resolve_workspace(request, payload.workspace)
    try:
        await asyncio.to_thread(_workspace.save_chat, root, payload.messages)
    except ContentStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"status": "ok"}


@app.post("/search")
async def search_pages(request: Request, payload: SearchPayload) -> dict[str, Any]:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Empty query")

    top_k = max(1, min(payload.top_k, 50))
    root = _resolve_workspace(request, payload.workspace)
    results = await asyncio.to_thread(_search_index, root, query, top_k)
    return {"results": [asdict(result) for result in results]}


def _search_index(root: Path, query: str, top_k: int) -> list:
    store = _open_index(root)
    try:
        return Searcher(store).search(query, top_k=top_k)
    finally:
        store.close()


def _read_documents(root: Path, limit: int | None) -> dict[str, Any]:
    if not _workspace.config.index_path(root).exists():
        return {"documents": [], "stats": {"document_count": 0, "word_count": 0, "char_count": 0}}

    store = _open_index(root)
    try:
        documents = Searcher(store).recent(limit=limit)
        stats = store.get_stats()
    finally:
        store.close()
    return {"documents": [asdict(doc) for doc in documents], "stats": stats}


@app.get("/documents")
async def list_documents(
    request: Request, workspace: Path | None = None, limit: int | None = None
) -> dict[str, Any]:
    """List indexed pages, most recently updated first."""
    root = _resolve_workspace(request, workspace)
    return await asyncio.to_thread(_read_documents, root, limit)


@app.get("/projects")
async def list_projects(request: Request, workspace: Path | None = None) -> dict[str, List[str]]:
    root = _resolve_workspace(request, workspace)
    try:
        names = await asyncio.to_thread(_workspace.list_projects, root)
    except ContentStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"projects": names}


@app.get("/workspace/default")
async def get_default_workspace() -> dict[str, str]:
    try:
        path = default_workspace()
    except OSError as exc:
        raise HTTPException(
            status_code=500, detail=f"Failed creating default workspace: {exc}"
        ) from exc
    return {"workspace": str(path)}
