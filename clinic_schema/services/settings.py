from __future__ import annotations
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from clinic_schema.settings_models import Settings

async def get_settings(session: AsyncSession) -> Settings:
    res = await session.execute(select(Settings).limit(1))
    s = res.scalars().first()
    if s is None:
        s = Settings()
        session.add(s)
        await session.commit()
        await session.refresh(s)
    return s

async def update_settings(
    session: AsyncSession,
    export_indent: Optional[int] = None,
    geocode_enabled: Optional[bool] = None,
    geocode_user_agent: Optional[str] = None,
    geocode_country_bias: Optional[str] = None,
) -> Settings:
    s = await get_settings(session)
    if export_indent is not None:
        s.export_indent = max(0, min(8, export_indent))
    if geocode_enabled is not None:
        s.geocode_enabled = geocode_enabled
    if geocode_user_agent is not None:
        s.geocode_user_agent = geocode_user_agent.strip() or s.geocode_user_agent
    if geocode_country_bias is not None:
        # empty string clears the bias
        s.geocode_country_bias = geocode_country_bias.strip().upper() or None
    session.add(s)
    await session.commit()
    await session.refresh(s)
    return s
