from __future__ import annotations
from typing import List

def to_friendly_messages(errors: List[str], variant_label: str) -> List[str]:
    friendly: List[str] = []
    for e in errors or []:
        low = e.lower()
        if "additional properties are not allowed" in low:
            friendly.append(f"The document has a field that does not belong to a '{variant_label}' listing: {e}")
            continue
        if "telephone" in low and "does not match" in low:
            friendly.append("Telephone numbers must not contain spaces, e.g. '+442012345678'.")
            continue
        if "latitude" in low or "longitude" in low:
            friendly.append("Latitude must be between -90 and 90 and longitude between -180 and 180.")
            continue
        if "description" in low and "too long" in low:
            friendly.append("Description is limited to 500 characters.")
            continue
        if "dayofweek" in low and "non-unique" in low:
            friendly.append("Each opening-hours entry should list a day only once.")
            continue
        # generic fallback
        friendly.append(e)
    return friendly[:12]
