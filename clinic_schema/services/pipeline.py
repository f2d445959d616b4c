from __future__ import annotations
from typing import Any, Dict

from clinic_schema.form_models import FormState
from clinic_schema.services.compile import compile_jsonld
from clinic_schema.services.friendly_errors import to_friendly_messages
from clinic_schema.services.prune import prune
from clinic_schema.services.schemas import load_schema, recommended_for
from clinic_schema.services.validate import validate_document
from clinic_schema.services.variants import variant_label

# state -> compile -> prune -> document. Callers rerun it after every change;
# nothing here keeps derived state between calls.

def build_raw_document(state: FormState) -> Dict[str, Any]:
    return compile_jsonld(state.entity, state.arity, state)

def build_document(state: FormState) -> Dict[str, Any]:
    return prune(build_raw_document(state))

def check_document(state: FormState) -> Dict[str, Any]:
    document = build_document(state)
    valid, errors = validate_document(document, load_schema(state.entity, state.arity))
    missing = [key for key in recommended_for(state.entity) if key not in document]
    return {
        "document": document,
        "valid": valid,
        "errors": errors,
        "messages": to_friendly_messages(errors, variant_label(state.entity, state.arity)),
        "advice": [f"Consider adding: {key}" for key in missing],
    }
