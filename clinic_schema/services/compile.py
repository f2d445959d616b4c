from __future__ import annotations
import math
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from clinic_schema.form_models import (
    Address, ClinicMultiple, ClinicSingle, EntityKind, FormState, LocationArity,
    OpeningHours, PractitionerMultiple, PractitionerSingle, SubOrganization, Workplace,
)
from clinic_schema.services.variants import UnknownVariantError, parse_variant

SCHEMA_CONTEXT = "https://schema.org"
PERSON_TYPE = "Physician"
CLINIC_TYPE = "MedicalClinic"
DUAL_TYPE = [PERSON_TYPE, CLINIC_TYPE]
SERVICE_TYPE = "MedicalProcedure"

Json = Dict[str, Any]

# The compiler maps form state to a raw JSON-LD tree. It never drops blank
# values itself; prune() removes them afterwards.

# plain ASCII decimals only; float() would also accept "51_5237", "nan"
# and non-ASCII digits
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

def parse_decimal(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
    elif isinstance(value, str) and _DECIMAL.fullmatch(value.strip()):
        f = float(value.strip())
    else:
        return None
    return f if math.isfinite(f) else None

def _leading_int(value: Any) -> int:
    # "187" -> 187, "12 reviews" -> 12, "4.7" -> 4, junk -> 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    m = re.match(r"\s*([+-]?[0-9]+)", value if isinstance(value, str) else "")
    return int(m.group(1)) if m else 0

def _postal_address(loc: Address) -> Json:
    return {
        "@type": "PostalAddress",
        "streetAddress": loc.street_address,
        "addressLocality": loc.city,
        "addressRegion": loc.region,
        "postalCode": loc.postal_code,
        "addressCountry": loc.country,
    }

def _geo(loc: Address) -> Optional[Json]:
    lat, lon = parse_decimal(loc.latitude), parse_decimal(loc.longitude)
    if lat is None or lon is None:
        return None
    return {"@type": "GeoCoordinates", "latitude": lat, "longitude": lon}

def _opening_hours(hours: Sequence[OpeningHours]) -> List[Json]:
    return [
        {"@type": "OpeningHoursSpecification", "dayOfWeek": list(h.days), "opens": h.opens, "closes": h.closes}
        for h in hours
    ]

def _services(services: Sequence[str]) -> List[Json]:
    return [{"@type": SERVICE_TYPE, "name": s} for s in services]

def _aggregate_rating(rating_value: str, review_count: str) -> Optional[Json]:
    rating = parse_decimal(rating_value)
    if rating is None:
        return None
    return {"@type": "AggregateRating", "ratingValue": rating, "reviewCount": _leading_int(review_count)}

def _workplace(loc: Workplace, services: Sequence[str]) -> Json:
    return {
        "@type": CLINIC_TYPE,
        "name": loc.name,
        "url": loc.url,
        "telephone": loc.telephone,
        "address": _postal_address(loc),
        "geo": _geo(loc),
        "openingHoursSpecification": _opening_hours(loc.opening_hours),
        "availableService": _services(services),
    }

def _person(data) -> Json:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": PERSON_TYPE,
        "name": data.name,
        "honorificSuffix": data.honorific_suffix,
        "jobTitle": data.job_title,
        "url": data.url,
        "telephone": data.telephone,
        "sameAs": list(data.same_as),
    }

def _practitioner_single(data: PractitionerSingle) -> Json:
    obj = _person(data)
    obj["worksFor"] = _workplace(data.works_for, data.works_for.services)
    return obj

def _practitioner_multiple(data: PractitionerMultiple) -> Json:
    obj = _person(data)
    # every location advertises the shared services list
    obj["worksFor"] = [_workplace(loc, data.services) for loc in data.works_for]
    return obj

def _clinic_root(data: ClinicSingle) -> Json:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": list(DUAL_TYPE),
        "name": data.name,
        "description": data.description,
        "url": data.url,
        "telephone": data.telephone,
        "email": data.email,
        "priceRange": data.price_range,
        "logo": data.logo,
        "image": data.image,
        "hasMap": data.has_map,
        "sameAs": list(data.same_as),
        "medicalSpecialty": data.medical_specialty,
        "address": _postal_address(data),
        "geo": _geo(data),
        "openingHoursSpecification": _opening_hours(data.opening_hours),
        "availableService": _services(data.services),
        "aggregateRating": _aggregate_rating(data.rating_value, data.review_count),
    }

def _sub_organization(org: SubOrganization) -> Json:
    return {
        "@type": list(DUAL_TYPE),
        "name": org.name,
        "hasMap": org.has_map,
        "address": _postal_address(org),
        "geo": _geo(org),
        "openingHoursSpecification": _opening_hours(org.opening_hours),
    }

def _clinic_single(data: ClinicSingle) -> Json:
    return _clinic_root(data)

def _clinic_multiple(data: ClinicMultiple) -> Json:
    obj = _clinic_root(data)
    obj["subOrganization"] = [_sub_organization(org) for org in data.sub_organizations]
    return obj

_BUILDERS: Dict[Tuple[EntityKind, LocationArity], Tuple[type, Callable[[Any], Json]]] = {
    (EntityKind.PRACTITIONER, LocationArity.SINGLE): (PractitionerSingle, _practitioner_single),
    (EntityKind.PRACTITIONER, LocationArity.MULTIPLE): (PractitionerMultiple, _practitioner_multiple),
    (EntityKind.CLINIC, LocationArity.SINGLE): (ClinicSingle, _clinic_single),
    (EntityKind.CLINIC, LocationArity.MULTIPLE): (ClinicMultiple, _clinic_multiple),
}

def compile_jsonld(entity, arity, data: FormState) -> Json:
    """Build the raw JSON-LD document for one of the four variants.

    Missing or unparseable optional fields never raise; they are left blank
    (for the pruner) or omitted. An unknown variant, or a state whose shape
    belongs to another variant, raises UnknownVariantError.
    """
    key = parse_variant(entity, arity)
    expected, build = _BUILDERS[key]
    if type(data) is not expected:
        raise UnknownVariantError(
            f"{type(data).__name__} cannot be compiled as ({key[0].value}, {key[1].value})"
        )
    return build(data)
