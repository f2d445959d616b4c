from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime, timezone

from clinic_schema.form_models import FormState
from clinic_schema.models import SavedSchema
from clinic_schema.services.form_state import state_from_dict, state_to_dict

async def save_state(session: AsyncSession, name: str, state: FormState) -> SavedSchema:
    """Persist a form state together with its variant tag."""
    row = SavedSchema(
        created_at=datetime.now(timezone.utc),
        name=(name or "").strip() or "Untitled",
        entity=state.entity.value,
        arity=state.arity.value,
        form=state_to_dict(state),
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row

async def list_saved(session: AsyncSession, q: str | None = None, limit: int = 100):
    stmt = select(SavedSchema).order_by(SavedSchema.created_at.desc(), SavedSchema.id.desc()).limit(limit)
    if q:
        stmt = stmt.filter(SavedSchema.name.contains(q))
    res = await session.execute(stmt)
    return res.scalars().all()

async def get_saved(session: AsyncSession, saved_id: int):
    res = await session.execute(select(SavedSchema).where(SavedSchema.id == saved_id))
    return res.scalars().first()

async def delete_saved(session: AsyncSession, saved_id: int) -> bool:
    row = await get_saved(session, saved_id)
    if row is None:
        return False
    await session.delete(row)
    await session.commit()
    return True

def load_state(row: SavedSchema) -> FormState:
    return state_from_dict(row.entity, row.arity, row.form)
