from __future__ import annotations
import dataclasses
import hashlib
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from clinic_schema.form_models import FormState
from clinic_schema.services.compile import parse_decimal
from clinic_schema.services.form_state import (
    UnknownFieldError, get_value, normalize_telephone, parse_path, set_field,
)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "clinic-schema-gen/1.0 (https://example.org)"

_CACHE: Dict[str, "PlaceFact"] = {}

class MalformedPlaceError(ValueError):
    """The place payload cannot be turned into a location fact."""

@dataclass(frozen=True)
class PlaceFact:
    street_address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country_code: str = ""
    latitude: str = ""
    longitude: str = ""
    name: Optional[str] = None
    telephone: Optional[str] = None
    url: Optional[str] = None

def _coord(value: Any) -> str:
    f = parse_decimal(value)
    if f is None:
        raise MalformedPlaceError(f"Bad coordinate: {value!r}")
    return value.strip() if isinstance(value, str) else repr(f)

def place_fact_from_google(place: Dict[str, Any]) -> PlaceFact:
    """Normalize a Places-style result (address_components + geometry)."""
    if not isinstance(place, dict):
        raise MalformedPlaceError("Place result must be an object")
    components = place.get("address_components")
    if not isinstance(components, list) or not components:
        raise MalformedPlaceError("Place result has no address_components")

    parts: Dict[str, str] = {}
    for c in components:
        if not isinstance(c, dict) or not isinstance(c.get("types"), list):
            raise MalformedPlaceError(f"Malformed address component: {c!r}")
        types = c["types"]
        if "street_number" in types: parts["street_number"] = c.get("long_name") or ""
        if "route" in types: parts["route"] = c.get("long_name") or ""
        if "locality" in types: parts["city"] = c.get("long_name") or ""
        if "administrative_area_level_1" in types: parts["region"] = c.get("long_name") or ""
        if "postal_code" in types: parts["postal_code"] = c.get("long_name") or ""
        if "country" in types: parts["country"] = c.get("short_name") or ""

    lat = lon = ""
    location = (place.get("geometry") or {}).get("location")
    if location is not None:
        if not isinstance(location, dict):
            raise MalformedPlaceError("geometry.location must be an object")
        lat, lon = _coord(location.get("lat")), _coord(location.get("lng"))

    street = " ".join(p for p in (parts.get("street_number"), parts.get("route")) if p)
    return PlaceFact(
        street_address=street,
        city=parts.get("city", ""),
        region=parts.get("region", ""),
        postal_code=parts.get("postal_code", ""),
        country_code=parts.get("country", ""),
        latitude=lat,
        longitude=lon,
        name=place.get("name") or None,
        telephone=place.get("formatted_phone_number") or None,
        url=place.get("website") or None,
    )

def place_fact_from_nominatim(item: Dict[str, Any]) -> PlaceFact:
    if not isinstance(item, dict):
        raise MalformedPlaceError("Nominatim result must be an object")
    addr = item.get("address") or {}
    if not isinstance(addr, dict):
        raise MalformedPlaceError("Nominatim address must be an object")
    street = " ".join(p for p in (addr.get("house_number"), addr.get("road")) if p)
    return PlaceFact(
        street_address=street,
        city=addr.get("city") or addr.get("town") or addr.get("village") or "",
        region=addr.get("state") or "",
        postal_code=addr.get("postcode") or "",
        country_code=(addr.get("country_code") or "").upper(),
        latitude=_coord(item.get("lat")),
        longitude=_coord(item.get("lon")),
        name=item.get("name") or None,
    )

async def lookup_place(query: str, *, user_agent: str = DEFAULT_USER_AGENT, country_bias: Optional[str] = None,
                       client: Optional[httpx.AsyncClient] = None) -> Optional[PlaceFact]:
    """
    Best-effort address lookup using OpenStreetMap Nominatim (no key required).
    Returns a PlaceFact on success, else None. Results are cached per query.
    """
    q = " ".join((query or "").split())
    if not q:
        return None
    key = hashlib.sha256(f"{q.lower()}|{(country_bias or '').lower()}".encode("utf-8")).hexdigest()
    if key in _CACHE:
        return _CACHE[key]

    params = {"q": q, "format": "json", "limit": 1, "addressdetails": 1}
    if country_bias:
        params["countrycodes"] = country_bias.lower()
    headers = {"User-Agent": user_agent}

    try:
        if client is None:
            async with httpx.AsyncClient(headers=headers, timeout=10) as c:
                r = await c.get(NOMINATIM_URL, params=params)
        else:
            r = await client.get(NOMINATIM_URL, params=params, headers=headers)
        r.raise_for_status()
        data = r.json()
        fact = place_fact_from_nominatim(data[0]) if isinstance(data, list) and data else None
    except (httpx.HTTPError, ValueError) as e:
        # MalformedPlaceError and JSON decode errors are ValueErrors
        print(f"[WARN] place lookup failed for {q!r}: {e}", file=sys.stderr)
        return None
    # only hits are cached; a miss may succeed on a later try
    if fact is not None:
        _CACHE[key] = fact
    return fact

def apply_place_fact(state: FormState, target: Any, fact: PlaceFact, index: Optional[int] = None) -> FormState:
    """Merge a place into a location of the form.

    `target` is "" for the clinic root, a record path such as "works_for" for
    the single practitioner workplace, or a collection path ("works_for",
    "sub_organizations") together with `index`. The root clinic keeps its own
    name and contact details. Only fields the target declares are written.
    """
    if not isinstance(fact, PlaceFact):
        raise MalformedPlaceError("Expected a PlaceFact")
    if bool(fact.latitude) != bool(fact.longitude):
        raise MalformedPlaceError("Place has only one of latitude / longitude")
    if fact.latitude:
        _coord(fact.latitude)
        _coord(fact.longitude)

    steps = parse_path(target)
    if index is not None:
        steps = steps + [index]
    record = get_value(state, steps)
    declared = {f.name for f in dataclasses.fields(record)} if dataclasses.is_dataclass(record) else set()
    if "street_address" not in declared:
        raise UnknownFieldError(f"{target!r} does not address a location")

    updates: Dict[str, str] = {
        "street_address": fact.street_address,
        "city": fact.city,
        "region": fact.region,
        "postal_code": fact.postal_code,
        "country": fact.country_code,
    }
    if fact.latitude:
        updates["latitude"] = fact.latitude
        updates["longitude"] = fact.longitude
    if steps:
        if fact.name: updates["name"] = fact.name
        if fact.telephone: updates["telephone"] = normalize_telephone(fact.telephone)
        if fact.url: updates["url"] = fact.url

    # state is immutable, so nothing is visible until every write succeeded
    for field, value in updates.items():
        if field in declared:
            state = set_field(state, steps + [field], value)
    return state
