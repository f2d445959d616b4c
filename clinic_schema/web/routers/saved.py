from __future__ import annotations
import sys
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_schema.db import get_session
from clinic_schema.services.form_state import UnknownFieldError
from clinic_schema.services.saved import delete_saved, get_saved, list_saved, load_state, save_state
from clinic_schema.services.sessions import create_session, get_state
from clinic_schema.services.variants import UnknownVariantError, variant_label
from clinic_schema.web.routers.sessions import session_payload

router = APIRouter()

class SaveRequest(BaseModel):
    name: str = ""

def _row_summary(row) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "entity": row.entity,
        "arity": row.arity,
        "label": variant_label(row.entity, row.arity),
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }

@router.post("/sessions/{session_id}/save")
async def save_session(session_id: str, req: SaveRequest, session: AsyncSession = Depends(get_session)):
    state = await get_state(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    row = await save_state(session, req.name, state)
    return _row_summary(row)

@router.get("/saved")
async def saved_index(q: Optional[str] = Query(None), limit: int = Query(100, ge=1, le=500),
                      session: AsyncSession = Depends(get_session)):
    rows = await list_saved(session, q=q, limit=limit)
    return [_row_summary(r) for r in rows]

@router.post("/saved/{saved_id}/load")
async def load_saved(saved_id: int, session: AsyncSession = Depends(get_session)):
    row = await get_saved(session, saved_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Saved schema not found.")
    try:
        state = load_state(row)
    except (UnknownVariantError, UnknownFieldError, TypeError, ValueError) as e:
        print(f"[WARN] saved schema {saved_id} could not be loaded: {e}", file=sys.stderr)
        raise HTTPException(status_code=422, detail=f"Saved schema is not readable: {e}")
    session_id = await create_session(state.entity, state.arity, state)
    return session_payload(session_id, state)

@router.delete("/saved/{saved_id}")
async def remove_saved(saved_id: int, session: AsyncSession = Depends(get_session)):
    if not await delete_saved(session, saved_id):
        raise HTTPException(status_code=404, detail="Saved schema not found.")
    return {"ok": True}
