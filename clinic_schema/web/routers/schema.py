from __future__ import annotations
from typing import Any, Dict, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from clinic_schema.form_models import (
    CLINIC_NAME_OPTIONS, CLINIC_TYPE_OPTIONS, DAYS_OF_WEEK, MAX_DESCRIPTION_LENGTH,
    SUB_ORGANIZATION_TYPE_OPTIONS,
)
from clinic_schema.services.form_state import UnknownFieldError, state_from_dict, state_to_dict
from clinic_schema.services.pipeline import build_raw_document, check_document
from clinic_schema.services.variants import UnknownVariantError, available_variants, initial_state, variant_label

router = APIRouter()

class CompileRequest(BaseModel):
    entity: str
    arity: str
    form: Optional[Dict[str, Any]] = None
    include_raw: bool = False

@router.get("/options")
async def options():
    return {
        "variants": available_variants(),
        "days_of_week": list(DAYS_OF_WEEK),
        "clinic_types": list(CLINIC_TYPE_OPTIONS),
        "clinic_names": list(CLINIC_NAME_OPTIONS),
        "sub_organization_types": list(SUB_ORGANIZATION_TYPE_OPTIONS),
        "max_description_length": MAX_DESCRIPTION_LENGTH,
    }

@router.get("/templates/{entity}/{arity}")
async def template(entity: str, arity: str):
    try:
        state = initial_state(entity, arity)
    except UnknownVariantError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"entity": state.entity.value, "arity": state.arity.value,
            "label": variant_label(entity, arity), "form": state_to_dict(state)}

@router.post("/compile")
async def compile_form(req: CompileRequest):
    """Stateless: form dict in, pruned JSON-LD plus shape check out."""
    try:
        state = state_from_dict(req.entity, req.arity, req.form)
    except UnknownVariantError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (UnknownFieldError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid form: {e}")
    result = check_document(state)
    if req.include_raw:
        result["raw"] = build_raw_document(state)
    return result
