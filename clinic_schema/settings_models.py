from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field

class Settings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # JSON-LD export
    export_indent: int = Field(default=2)

    # Address lookup (OpenStreetMap Nominatim)
    geocode_enabled: bool = Field(default=True)
    geocode_user_agent: str = Field(default="clinic-schema-gen/1.0 (https://example.org)")
    geocode_country_bias: Optional[str] = Field(default=None)
