"""FastAPI service for session-share."""

import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel

from .backends import get_store
from .backends.gist import GistApiError, GistAuthError
from .core import SessionShareError
from .finder import find_most_recent_session, find_session_files
from .reader import EmptySessionError, NoValidMessagesError, SessionReadError
from .share import ShareError, import_session, preview_session, share_session
from .store import SessionStore
from .writer import SessionWriteError, WriteFailure

logger = logging.getLogger(__name__)

app = FastAPI(title="session-share", version="0.1.0")

# Store cache (populated on first request)
_store: SessionStore | None = None


def _get_store() -> SessionStore:
    """Lazily initialize and cache the session store."""
    global _store
    if _store is None:
        _store = get_store()
        logger.info("Using session store: %s", _store.name)
    return _store


def _http_error(e: SessionShareError) -> HTTPException:
    """Map a core error to an HTTP error."""
    if isinstance(e, GistAuthError):
        status = 401
    elif isinstance(e, GistApiError):
        status = 404 if e.status_code == 404 else 502
    elif isinstance(e, (EmptySessionError, NoValidMessagesError, ShareError)):
        status = 422
    elif isinstance(e, SessionReadError):
        status = 404
    elif isinstance(e, SessionWriteError):
        status = 507 if e.kind is WriteFailure.NO_SPACE else 500
    else:
        status = 500
    return HTTPException(status_code=status, detail=str(e))


def _resolve_session_path(path: str | None) -> Path:
    if path:
        return Path(path)
    found = find_most_recent_session()
    if found is None:
        raise HTTPException(status_code=404, detail="No session files found")
    return found


class ShareRequest(BaseModel):
    session_path: str | None = None


class ImportRequest(BaseModel):
    reference: str
    project_path: str


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/sessions/recent")
async def get_recent_session():
    """Return the most recently modified session file."""
    found = find_most_recent_session()
    if found is None:
        raise HTTPException(status_code=404, detail="No session files found")
    return {"path": str(found)}


@app.get("/api/sessions")
async def get_sessions(project: str = Query(..., description="Project directory")):
    """Return the session files stored for a project."""
    return {
        "project_path": project,
        "sessions": [
            {"path": str(f.path), "session_id": f.session_id, "is_agent": f.is_agent}
            for f in find_session_files(project)
        ],
    }


@app.get("/api/preview")
async def get_preview(path: str | None = Query(None, description="Session file (default: most recent)")):
    """Return the sanitized JSONL that sharing would publish."""
    session_path = _resolve_session_path(path)
    try:
        content = preview_session(session_path)
    except SessionShareError as e:
        raise _http_error(e)
    return Response(content=content, media_type="application/x-ndjson")


@app.post("/api/share")
async def post_share(request: ShareRequest):
    """Sanitize a session and publish it."""
    session_path = _resolve_session_path(request.session_path)
    try:
        published = share_session(session_path, _get_store())
    except SessionShareError as e:
        logger.error("Failed to share %s: %s", session_path, e)
        raise _http_error(e)
    return {"id": published.id, "url": published.url}


@app.post("/api/import")
async def post_import(request: ImportRequest):
    """Import a shared session into local storage."""
    project_path = os.path.abspath(request.project_path)
    try:
        result = import_session(request.reference, project_path, _get_store())
    except SessionShareError as e:
        logger.error("Failed to import %s: %s", request.reference, e)
        raise _http_error(e)
    return {
        "session_id": result.session_id,
        "session_path": str(result.session_path),
        "message_count": result.message_count,
        "skipped_count": result.skipped_count,
        "project_path": result.project_path,
    }
