from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse
from clinic_schema.db import get_session
from clinic_schema.services.settings import get_settings, update_settings

router = APIRouter()

class SettingsUpdate(BaseModel):
    export_indent: Optional[int] = None
    geocode_enabled: Optional[bool] = None
    geocode_user_agent: Optional[str] = None
    geocode_country_bias: Optional[str] = None

@router.get("/settings.json")
async def settings_json(session: AsyncSession = Depends(get_session)):
    s = await get_settings(session)
    return JSONResponse(s.model_dump())

@router.post("/settings")
async def save_settings(req: SettingsUpdate, session: AsyncSession = Depends(get_session)):
    s = await update_settings(
        session,
        export_indent=req.export_indent,
        geocode_enabled=req.geocode_enabled,
        geocode_user_agent=req.geocode_user_agent,
        geocode_country_bias=req.geocode_country_bias,
    )
    return JSONResponse(s.model_dump())
