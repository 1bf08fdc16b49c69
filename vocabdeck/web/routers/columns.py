from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse

from vocabdeck.web.dependencies import Workspace, get_workspace

router = APIRouter(prefix="/api/columns")


def _finder_state(ws: Workspace) -> dict:
    return {"path": list(ws.table_view.finder.path), "levels": ws.table_view.finder.describe()}


@router.get("")
async def column_finder(ws: Workspace = Depends(get_workspace)):
    return _finder_state(ws)


@router.post("/finder/select")
async def select_node(level: int = Form(...), node_id: str = Form(...), ws: Workspace = Depends(get_workspace)):
    if not ws.table_view.finder.select(level, node_id):
        return JSONResponse({"error": f"{node_id} is not shown at level {level}."}, status_code=400)
    return _finder_state(ws)


@router.put("/finder/path")
async def select_path(node_id: List[str] = Form([]), ws: Workspace = Depends(get_workspace)):
    """Replace the whole drill-down path (repeated ``node_id`` fields, root first)."""
    ws.table_view.finder.select_path(node_id)
    return _finder_state(ws)


@router.post("/{column_id}/visibility")
async def set_visibility(column_id: str, visible: bool = Form(...), ws: Workspace = Depends(get_workspace)):
    if not ws.table_view.set_column_visibility(column_id, visible):
        return JSONResponse({"error": f"Column {column_id} is not available."}, status_code=404)
    return _finder_state(ws)


@router.post("/{column_id}/size")
async def resize_column(column_id: str, width: int = Form(...), ws: Workspace = Depends(get_workspace)):
    try:
        size = ws.table_view.resize_column(column_id, width)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    return {"column_id": column_id, "size": size}
