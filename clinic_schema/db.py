from __future__ import annotations
from typing import AsyncGenerator
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
import os

DB_URL = os.getenv("CLINICSCHEMA_DB_URL", "sqlite+aiosqlite:///./clinic_schema.db")
engine = create_async_engine(DB_URL, echo=False, future=True)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def init_db() -> None:
    # table classes must be imported before create_all sees them
    import clinic_schema.models  # noqa: F401
    import clinic_schema.settings_models  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session

async def close_db() -> None:
    await engine.dispose()
