from __future__ import annotations
from typing import Any, Dict

def _is_keyword(key: str) -> bool:
    return isinstance(key, str) and key.startswith("@")

def _is_vacuous(v: Any) -> bool:
    """True for values that carry no data: None, blank text, empty lists,
    and objects with nothing left but JSON-LD keywords (@type, @context).
    Numbers and booleans, 0 and False included, always carry data."""
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    if isinstance(v, list):
        return not v
    if isinstance(v, dict):
        return all(_is_keyword(k) for k in v)
    return False

def _prune(v: Any) -> Any:
    if isinstance(v, dict):
        out: Dict[str, Any] = {}
        for k, child in v.items():
            child = _prune(child)
            if _is_vacuous(child):
                continue
            out[k] = child
        return out
    if isinstance(v, list):
        items = [_prune(child) for child in v]
        return [child for child in items if not _is_vacuous(child)]
    return v

def prune(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of `document` with every vacuous value removed, bottom-up.

    The root itself is always returned, even when only its @context/@type
    remain. prune(prune(d)) == prune(d).
    """
    return _prune(document if isinstance(document, dict) else {})
