from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vocabdeck.web.dependencies import Workspace, get_workspace

router = APIRouter(prefix="/api/flashcards")


def _require_session(ws: Workspace):
    if ws.study_session is None:
        return None, JSONResponse({"error": "No study session. Start one from the vocabulary list."}, status_code=404)
    return ws.study_session, None


@router.post("/start")
async def start_session(ws: Workspace = Depends(get_workspace)):
    """Snapshot the selected rows (table order) into a new session."""
    ws.study_session = ws.table_view.start_session()
    return ws.study_session.to_dict()


@router.get("")
async def current_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    return session.to_dict()


@router.post("/next")
async def next_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    changed = session.next()
    return dict(session.to_dict(), changed=changed)


@router.post("/previous")
async def previous_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    changed = session.previous()
    return dict(session.to_dict(), changed=changed)


@router.post("/flip")
async def flip_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    changed = session.flip()
    return dict(session.to_dict(), changed=changed)


@router.post("/remove")
async def remove_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    changed = session.remove()
    return dict(session.to_dict(), changed=changed)


@router.post("/flag")
async def flag_card(ws: Workspace = Depends(get_workspace)):
    session, error = _require_session(ws)
    if error:
        return error
    ok = await session.flag()
    return dict(session.to_dict(), changed=ok)


@router.delete("")
async def leave_session(ws: Workspace = Depends(get_workspace)):
    """Discard the session and refetch the table so flag changes show up."""
    ws.study_session = None
    ws.table_view.refresh()
    return ws.table_view.to_dict()
