from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field, Column, JSON
from datetime import datetime, timezone

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SavedSchema(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    name: str = Field(index=True)
    entity: str
    arity: str

    # the form state as a plain dict; the variant tag above says how to read it
    form: dict = Field(sa_column=Column(JSON), default_factory=dict)
