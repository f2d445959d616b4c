from __future__ import annotations
from typing import Dict, List, Tuple, Type

from clinic_schema.form_models import (
    ClinicMultiple, ClinicSingle, EntityKind, FormState, LocationArity,
    PractitionerMultiple, PractitionerSingle,
)

class UnknownVariantError(ValueError):
    """Raised for an (entity, arity) pair outside the four supported variants."""

_VARIANTS: Dict[Tuple[EntityKind, LocationArity], Type] = {
    (EntityKind.PRACTITIONER, LocationArity.SINGLE): PractitionerSingle,
    (EntityKind.PRACTITIONER, LocationArity.MULTIPLE): PractitionerMultiple,
    (EntityKind.CLINIC, LocationArity.SINGLE): ClinicSingle,
    (EntityKind.CLINIC, LocationArity.MULTIPLE): ClinicMultiple,
}

_ENTITY_LABELS = {EntityKind.PRACTITIONER: "Practitioner", EntityKind.CLINIC: "Medical Clinic"}
_ARITY_LABELS = {LocationArity.SINGLE: "Single Location", LocationArity.MULTIPLE: "Multiple Locations"}

def parse_variant(entity, arity) -> Tuple[EntityKind, LocationArity]:
    """Accept enum members or their string values ('clinic', 'multiple')."""
    try:
        return EntityKind(entity), LocationArity(arity)
    except ValueError:
        raise UnknownVariantError(f"Unknown variant: ({entity!r}, {arity!r})") from None

def variant_class(entity, arity) -> Type:
    key = parse_variant(entity, arity)
    return _VARIANTS[key]

def initial_state(entity, arity) -> FormState:
    # Every record's defaults are the template: blank fields, one opening-hours
    # slot Monday-Friday 09:00-18:00, one blank service/link/review slot.
    return variant_class(entity, arity)()

def variant_label(entity, arity) -> str:
    e, a = parse_variant(entity, arity)
    return f"{_ENTITY_LABELS[e]} - {_ARITY_LABELS[a]}"

def available_variants() -> List[Dict[str, str]]:
    return [
        {"entity": e.value, "arity": a.value, "label": variant_label(e, a)}
        for (e, a) in _VARIANTS
    ]
