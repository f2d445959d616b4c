from __future__ import annotations
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from clinic_schema.db import get_session
from clinic_schema.form_models import FormState
from clinic_schema.services.form_state import UnknownFieldError, apply_operation, state_to_dict
from clinic_schema.services.pipeline import check_document
from clinic_schema.services.places import (
    MalformedPlaceError, apply_place_fact, lookup_place, place_fact_from_google,
)
from clinic_schema.services.sessions import (
    create_session, drop_session, get_state, reset_variant, update_state,
)
from clinic_schema.services.settings import get_settings
from clinic_schema.services.variants import UnknownVariantError, variant_label

router = APIRouter()

class VariantRequest(BaseModel):
    entity: str
    arity: str

class MutationRequest(BaseModel):
    op: str
    path: Any = None
    index: Optional[int] = None
    field: Optional[str] = None
    value: Any = None
    item: Any = None
    day: Optional[str] = None

class PlaceRequest(BaseModel):
    target: str = ""
    index: Optional[int] = None
    place: Optional[Dict[str, Any]] = None
    query: Optional[str] = None

def session_payload(session_id: str, state: FormState) -> Dict[str, Any]:
    # the document is rebuilt on every response, never cached
    result = check_document(state)
    return {
        "id": session_id,
        "entity": state.entity.value,
        "arity": state.arity.value,
        "label": variant_label(state.entity, state.arity),
        "form": state_to_dict(state),
        "document": result["document"],
        "valid": result["valid"],
        "errors": result["messages"],
        "advice": result["advice"],
    }

async def _require_state(session_id: str) -> FormState:
    state = await get_state(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    return state

def _export_filename(state: FormState) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (state.name or "").lower()).strip("-") or "schema"
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return f"{state.entity.value}-{slug}-{ts}.jsonld"

@router.post("/sessions")
async def new_session(req: VariantRequest):
    try:
        session_id = await create_session(req.entity, req.arity)
    except UnknownVariantError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_payload(session_id, await _require_state(session_id))

@router.get("/sessions/{session_id}")
async def read_session(session_id: str):
    return session_payload(session_id, await _require_state(session_id))

@router.put("/sessions/{session_id}/variant")
async def change_variant(session_id: str, req: VariantRequest):
    await _require_state(session_id)
    try:
        state = await reset_variant(session_id, req.entity, req.arity)
    except UnknownVariantError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    return session_payload(session_id, state)

@router.post("/sessions/{session_id}/mutations")
async def mutate(session_id: str, req: MutationRequest):
    args = req.model_dump(exclude_unset=True)
    op = args.pop("op")
    try:
        state = await update_state(session_id, lambda current: apply_operation(current, op, args))
    except (UnknownFieldError, IndexError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    return session_payload(session_id, state)

@router.post("/sessions/{session_id}/place")
async def apply_place(session_id: str, req: PlaceRequest, session: AsyncSession = Depends(get_session)):
    await _require_state(session_id)
    if req.place is not None:
        try:
            fact = place_fact_from_google(req.place)
        except MalformedPlaceError as e:
            raise HTTPException(status_code=422, detail=f"Place not applied: {e}")
    elif req.query:
        s = await get_settings(session)
        if not s.geocode_enabled:
            raise HTTPException(status_code=400, detail="Address lookup is disabled in settings.")
        fact = await lookup_place(req.query, user_agent=s.geocode_user_agent, country_bias=s.geocode_country_bias)
        if fact is None:
            raise HTTPException(status_code=422, detail="No place found for that query.")
    else:
        raise HTTPException(status_code=400, detail="Provide either 'place' or 'query'.")

    # merge into the state as it is now, not as it was before the lookup
    try:
        state = await update_state(session_id, lambda current: apply_place_fact(current, req.target, fact, index=req.index))
    except MalformedPlaceError as e:
        raise HTTPException(status_code=422, detail=f"Place not applied: {e}")
    except (UnknownFieldError, IndexError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    if state is None:
        raise HTTPException(status_code=404, detail="Unknown session.")
    return session_payload(session_id, state)

@router.get("/sessions/{session_id}/export")
async def export_session(session_id: str, session: AsyncSession = Depends(get_session)):
    state = await _require_state(session_id)
    s = await get_settings(session)
    document = check_document(state)["document"]
    body = json.dumps(document, indent=s.export_indent or None, ensure_ascii=False)
    return Response(
        content=body,
        media_type="application/ld+json",
        headers={"Content-Disposition": f'attachment; filename="{_export_filename(state)}"'},
    )

@router.delete("/sessions/{session_id}")
async def close_session(session_id: str):
    if not await drop_session(session_id):
        raise HTTPException(status_code=404, detail="Unknown session.")
    return {"ok": True}
