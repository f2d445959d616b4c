from __future__ import annotations
from typing import Any, Dict, List, Tuple
import json

from jsonschema import Draft7Validator

def _fmt(e) -> str:
    path = ".".join(map(str, e.path)) or "$"
    return f"{path}: {e.message}"

def validate_document(instance: Dict[str, Any], schema_in: Any) -> Tuple[bool, List[str]]:
    """Validate a JSON-LD document against a JSON Schema.
    Accepts the schema as a dict or a JSON string.
    Returns (is_valid, error_messages).
    """
    if isinstance(schema_in, (bytes, bytearray, str)):
        schema = json.loads(schema_in)
    elif isinstance(schema_in, dict):
        schema = schema_in
    else:
        raise TypeError(f"Unsupported schema type: {type(schema_in).__name__}")

    v = Draft7Validator(schema)
    errs = sorted(v.iter_errors(instance), key=lambda e: list(map(str, e.path)))
    if errs:
        return False, [_fmt(e) for e in errs]
    return True, []
