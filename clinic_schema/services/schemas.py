from __future__ import annotations
from typing import Any, Dict, Tuple

from clinic_schema.form_models import DAYS_OF_WEEK, EntityKind, LocationArity
from clinic_schema.services.variants import parse_variant

# JSON Schemas for the exported (pruned) documents, one per variant.
# Every object is closed (additionalProperties: false) so a key that belongs
# to another variant fails validation.

def _closed(properties: Dict[str, Any], required=()) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties, "additionalProperties": False}
    if required:
        schema["required"] = list(required)
    return schema

_STRING = {"type": "string"}
_STRINGS = {"type": "array", "items": {"type": "string"}}
_DUAL_TYPE = {"const": ["Physician", "MedicalClinic"]}

POSTAL_ADDRESS_SCHEMA = _closed({
    "@type": {"const": "PostalAddress"},
    "streetAddress": _STRING,
    "addressLocality": _STRING,
    "addressRegion": _STRING,
    "postalCode": _STRING,
    "addressCountry": _STRING,
}, required=["@type"])

GEO_SCHEMA = _closed({
    "@type": {"const": "GeoCoordinates"},
    "latitude": {"type": "number", "minimum": -90, "maximum": 90},
    "longitude": {"type": "number", "minimum": -180, "maximum": 180},
}, required=["@type", "latitude", "longitude"])

OPENING_HOURS_SCHEMA = _closed({
    "@type": {"const": "OpeningHoursSpecification"},
    "dayOfWeek": {"type": "array", "items": {"enum": list(DAYS_OF_WEEK)}, "uniqueItems": True},
    "opens": _STRING,
    "closes": _STRING,
}, required=["@type"])

SERVICE_SCHEMA = _closed({
    "@type": {"const": "MedicalProcedure"},
    "name": _STRING,
}, required=["@type", "name"])

AGGREGATE_RATING_SCHEMA = _closed({
    "@type": {"const": "AggregateRating"},
    "ratingValue": {"type": "number"},
    "reviewCount": {"type": "integer"},
}, required=["@type", "ratingValue", "reviewCount"])

WORKPLACE_SCHEMA = _closed({
    "@type": {"const": "MedicalClinic"},
    "name": _STRING,
    "url": _STRING,
    "telephone": {"type": "string", "pattern": r"^\S*$"},
    "address": POSTAL_ADDRESS_SCHEMA,
    "geo": GEO_SCHEMA,
    "openingHoursSpecification": {"type": "array", "items": OPENING_HOURS_SCHEMA},
    "availableService": {"type": "array", "items": SERVICE_SCHEMA},
}, required=["@type"])

_PERSON_PROPERTIES: Dict[str, Any] = {
    "@context": {"const": "https://schema.org"},
    "@type": {"const": "Physician"},
    "name": _STRING,
    "honorificSuffix": _STRING,
    "jobTitle": _STRING,
    "url": _STRING,
    "telephone": {"type": "string", "pattern": r"^\S*$"},
    "sameAs": _STRINGS,
}

PRACTITIONER_SINGLE_SCHEMA = _closed(
    dict(_PERSON_PROPERTIES, worksFor=WORKPLACE_SCHEMA),
    required=["@context", "@type"],
)

PRACTITIONER_MULTIPLE_SCHEMA = _closed(
    dict(_PERSON_PROPERTIES, worksFor={"type": "array", "items": WORKPLACE_SCHEMA}),
    required=["@context", "@type"],
)

_CLINIC_PROPERTIES: Dict[str, Any] = {
    "@context": {"const": "https://schema.org"},
    "@type": _DUAL_TYPE,
    "name": _STRING,
    "description": {"type": "string", "maxLength": 500},
    "url": _STRING,
    "telephone": {"type": "string", "pattern": r"^\S*$"},
    "email": _STRING,
    "priceRange": _STRING,
    "logo": _STRING,
    "image": _STRING,
    "hasMap": _STRING,
    "sameAs": _STRINGS,
    "medicalSpecialty": _STRING,
    "address": POSTAL_ADDRESS_SCHEMA,
    "geo": GEO_SCHEMA,
    "openingHoursSpecification": {"type": "array", "items": OPENING_HOURS_SCHEMA},
    "availableService": {"type": "array", "items": SERVICE_SCHEMA},
    "aggregateRating": AGGREGATE_RATING_SCHEMA,
}

SUB_ORGANIZATION_SCHEMA = _closed({
    "@type": _DUAL_TYPE,
    "name": _STRING,
    "hasMap": _STRING,
    "address": POSTAL_ADDRESS_SCHEMA,
    "geo": GEO_SCHEMA,
    "openingHoursSpecification": {"type": "array", "items": OPENING_HOURS_SCHEMA},
}, required=["@type"])

CLINIC_SINGLE_SCHEMA = _closed(dict(_CLINIC_PROPERTIES), required=["@context", "@type"])

CLINIC_MULTIPLE_SCHEMA = _closed(
    dict(_CLINIC_PROPERTIES, subOrganization={"type": "array", "items": SUB_ORGANIZATION_SCHEMA}),
    required=["@context", "@type"],
)

_SCHEMAS: Dict[Tuple[EntityKind, LocationArity], Dict[str, Any]] = {
    (EntityKind.PRACTITIONER, LocationArity.SINGLE): PRACTITIONER_SINGLE_SCHEMA,
    (EntityKind.PRACTITIONER, LocationArity.MULTIPLE): PRACTITIONER_MULTIPLE_SCHEMA,
    (EntityKind.CLINIC, LocationArity.SINGLE): CLINIC_SINGLE_SCHEMA,
    (EntityKind.CLINIC, LocationArity.MULTIPLE): CLINIC_MULTIPLE_SCHEMA,
}

# Fields a complete listing should carry, used for the "consider adding" tips.
_RECOMMENDED = {
    EntityKind.PRACTITIONER: ["name", "url", "telephone", "jobTitle", "worksFor"],
    EntityKind.CLINIC: ["name", "url", "telephone", "address", "openingHoursSpecification", "availableService"],
}

def load_schema(entity, arity) -> Dict[str, Any]:
    return _SCHEMAS[parse_variant(entity, arity)]

def recommended_for(entity) -> list:
    return list(_RECOMMENDED[EntityKind(entity)])
