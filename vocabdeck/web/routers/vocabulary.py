from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse

from vocabdeck.models.columns import INTEGER_SET, MEMBERSHIP
from vocabdeck.service.vocab_service import TsvImportError
from vocabdeck.web.dependencies import Workspace, get_workspace

router = APIRouter(prefix="/api/vocabulary")


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("")
async def vocabulary_table(ws: Workspace = Depends(get_workspace)):
    return ws.table_view.to_dict()


@router.post("/refresh")
async def refresh(ws: Workspace = Depends(get_workspace)):
    ws.table_view.refresh()
    return ws.table_view.to_dict()


@router.put("/filters/{column_id}")
async def set_filter(column_id: str, value: List[str] = Form([]), ws: Workspace = Depends(get_workspace)):
    """Set a column filter.

    Membership columns take the repeated ``value`` field as a list. Integer
    columns take one ``"1-5, 8"`` text or several picked values.
    """
    column = ws.table_view.columns.get(column_id)
    if column is None:
        return _error(f"Unknown column: {column_id}", status_code=404)
    if column.filter_kind == MEMBERSHIP or (column.filter_kind == INTEGER_SET and len(value) > 1):
        payload = value
    else:
        payload = value[0] if value else ""
    try:
        ws.table_view.set_filter(column_id, payload)
    except ValueError as e:
        return _error(str(e))
    return ws.table_view.to_dict()


@router.put("/filters/{column_id}/input")
async def type_filter_input(column_id: str, value: str = Form(""), ws: Workspace = Depends(get_workspace)):
    """Keystroke-level input for integer filters; applied after the debounce delay."""
    try:
        ws.table_view.type_filter_input(column_id, value)
    except ValueError as e:
        return _error(str(e))
    return {"pending": ws.table_view.pending_filter_inputs()}


@router.delete("/filters/{column_id}")
async def clear_filter(column_id: str, ws: Workspace = Depends(get_workspace)):
    ws.table_view.filters.clear_filter(column_id)
    return ws.table_view.to_dict()


@router.put("/global-filter")
async def set_global_filter(query: str = Form(""), ws: Workspace = Depends(get_workspace)):
    ws.table_view.filters.set_global(query)
    return ws.table_view.to_dict()


@router.post("/sort/{column_id}")
async def toggle_sort(column_id: str, multi: bool = Form(False), ws: Workspace = Depends(get_workspace)):
    try:
        ws.table_view.sort_spec.toggle(column_id, multi=multi)
    except ValueError as e:
        return _error(str(e))
    return ws.table_view.to_dict()


@router.delete("/sort")
async def clear_sort(ws: Workspace = Depends(get_workspace)):
    ws.table_view.sort_spec.clear()
    return ws.table_view.to_dict()


@router.post("/rows/{vocab_id}/toggle")
async def toggle_row(vocab_id: int, ws: Workspace = Depends(get_workspace)):
    selected = ws.table_view.toggle_row(vocab_id)
    return {"vocab_id": vocab_id, "selected": selected}


@router.post("/select-visible")
async def select_visible(selected: bool = Form(...), ws: Workspace = Depends(get_workspace)):
    """Header checkbox: (un)select the rows currently shown, nothing else."""
    ws.table_view.select_all_visible(selected)
    return ws.table_view.to_dict()


@router.post("/import")
async def import_tsv(tsv_data: str = Form(""), ws: Workspace = Depends(get_workspace)):
    try:
        status = ws.vocab_service.import_entries(tsv_data)
    except TsvImportError as e:
        return _error(str(e))
    ws.table_view.refresh()
    return {"status": status, "total": len(ws.table_view.entries)}
