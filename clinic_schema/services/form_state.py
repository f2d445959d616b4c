from __future__ import annotations
import dataclasses
import re
import typing
from typing import Any, Dict, List, Tuple, Union

from clinic_schema.form_models import DAYS_OF_WEEK, MAX_DESCRIPTION_LENGTH, FormState
from clinic_schema.services.variants import variant_class

# Form state mutations. Every function here is pure: it takes a FormState and
# returns a new one, leaving the input untouched. Paths are dotted strings of
# field names and indexes ("works_for.0.opening_hours") or a list of steps.

Step = Union[str, int]

class UnknownFieldError(LookupError):
    """A path step names a field the addressed record does not declare."""

_HINTS: Dict[type, Dict[str, Any]] = {}

def _field_types(cls: type) -> Dict[str, Any]:
    hints = _HINTS.get(cls)
    if hints is None:
        names = {f.name for f in dataclasses.fields(cls)}
        hints = {k: v for k, v in typing.get_type_hints(cls).items() if k in names}
        _HINTS[cls] = hints
    return hints

def parse_path(path: Any) -> List[Step]:
    if path is None or path == "":
        return []
    raw = list(path) if isinstance(path, (list, tuple)) else str(path).split(".")
    steps: List[Step] = []
    for s in raw:
        if isinstance(s, str) and s.isdigit():
            steps.append(int(s))
        else:
            steps.append(s)
    return steps

def _describe(steps: List[Step]) -> str:
    return ".".join(str(s) for s in steps) or "<root>"

def _check_index(items: tuple, index: Any, steps: List[Step]) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"Index must be an integer at {_describe(steps)}")
    if index < 0 or index >= len(items):
        raise IndexError(f"Index {index} out of range at {_describe(steps)} (size {len(items)})")

def _resolve(state: FormState, steps: List[Step]) -> Tuple[Any, Any]:
    """Walk `steps` from the root, returning (value, declared type)."""
    value: Any = state
    declared: Any = type(state)
    walked: List[Step] = []
    for step in steps:
        if isinstance(step, int):
            if not isinstance(value, tuple):
                raise UnknownFieldError(f"{_describe(walked)} is not a collection")
            _check_index(value, step, walked)
            value = value[step]
            declared = typing.get_args(declared)[0]
        else:
            if not dataclasses.is_dataclass(value) or step not in _field_types(type(value)):
                raise UnknownFieldError(f"{type(value).__name__} has no field {step!r} (at {_describe(walked)})")
            declared = _field_types(type(value))[step]
            value = getattr(value, step)
        walked.append(step)
    return value, declared

def _assign(obj: Any, steps: List[Step], value: Any) -> Any:
    if not steps:
        return value
    head, rest = steps[0], steps[1:]
    if isinstance(head, int):
        return obj[:head] + (_assign(obj[head], rest, value),) + obj[head + 1:]
    # replace() re-runs __post_init__, so day sets and tag sets stay canonical
    return dataclasses.replace(obj, **{head: _assign(getattr(obj, head), rest, value)})

def coerce(declared: Any, value: Any) -> Any:
    """Convert plain JSON-ish values into the declared field type."""
    if typing.get_origin(declared) is tuple:
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
            raise TypeError(f"Expected a list, got {type(value).__name__}")
        item_type = typing.get_args(declared)[0]
        return tuple(coerce(item_type, v) for v in value)
    if dataclasses.is_dataclass(declared):
        if type(value) is declared:
            return value
        if isinstance(value, dict):
            return record_from_dict(declared, value)
        raise TypeError(f"Expected {declared.__name__} or an object, got {type(value).__name__}")
    if declared is bool:
        if isinstance(value, bool):
            return value
        raise TypeError(f"Expected a boolean, got {type(value).__name__}")
    if declared is str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise TypeError(f"Expected a string, got {type(value).__name__}")
    return value

def record_from_dict(cls: type, data: Dict[str, Any]) -> Any:
    hints = _field_types(cls)
    unknown = [k for k in data if k not in hints]
    if unknown:
        raise UnknownFieldError(f"{cls.__name__} has no field(s): {', '.join(sorted(unknown))}")
    return cls(**{k: coerce(hints[k], v) for k, v in data.items()})

def _collection(state: FormState, path: Any) -> Tuple[List[Step], tuple, Any]:
    steps = parse_path(path)
    items, declared = _resolve(state, steps)
    if typing.get_origin(declared) is not tuple:
        raise UnknownFieldError(f"{_describe(steps)} is not a collection")
    return steps, items, typing.get_args(declared)[0]


# ----- mutation vocabulary -----

def get_value(state: FormState, path: Any) -> Any:
    value, _ = _resolve(state, parse_path(path))
    return value

def set_field(state: FormState, path: Any, value: Any) -> FormState:
    steps = parse_path(path)
    if not steps:
        raise UnknownFieldError("set_field needs a field path")
    _, declared = _resolve(state, steps)
    return _assign(state, steps, coerce(declared, value))

def set_nested_field(state: FormState, parent_path: Any, field: str, value: Any) -> FormState:
    return set_field(state, parse_path(parent_path) + [field], value)

def append_item(state: FormState, collection_path: Any, item: Any) -> FormState:
    steps, items, item_type = _collection(state, collection_path)
    return _assign(state, steps, items + (coerce(item_type, item),))

def remove_item(state: FormState, collection_path: Any, index: int) -> FormState:
    # The "keep at least one slot" rule belongs to the form, not here.
    steps, items, _ = _collection(state, collection_path)
    _check_index(items, index, steps)
    return _assign(state, steps, items[:index] + items[index + 1:])

def replace_item(state: FormState, collection_path: Any, index: int, item: Any) -> FormState:
    steps, _, _ = _collection(state, collection_path)
    return set_field(state, steps + [index], item)

def set_item_field(state: FormState, collection_path: Any, index: int, field: str, value: Any) -> FormState:
    steps, _, _ = _collection(state, collection_path)
    return set_field(state, steps + [index, field], value)


# ----- form helpers -----

def toggle_day(state: FormState, hours_path: Any, index: int, day: str) -> FormState:
    if day not in DAYS_OF_WEEK:
        raise ValueError(f"Unknown day of week: {day!r}")
    steps, _, _ = _collection(state, hours_path)
    entry = get_value(state, steps + [index])
    if day in entry.days:
        days = [d for d in entry.days if d != day]
    else:
        days = list(entry.days) + [day]
    return set_item_field(state, steps, index, "days", days)

def add_type_tag(state: FormState, tags_path: Any, label: str) -> FormState:
    """Add a clinic / sub-organization type; blanks and duplicates are ignored."""
    label = (label or "").strip()
    _, tags, _ = _collection(state, tags_path)
    if not label or label in tags:
        return state
    return append_item(state, tags_path, label)

def remove_type_tag(state: FormState, tags_path: Any, label: str) -> FormState:
    _, tags, _ = _collection(state, tags_path)
    if label not in tags:
        return state
    return set_field(state, tags_path, [t for t in tags if t != label])

def normalize_telephone(value: str | None) -> str:
    return re.sub(r"\s+", "", value or "")

def set_telephone(state: FormState, path: Any, value: str | None) -> FormState:
    return set_field(state, path, normalize_telephone(value))

def set_description(state: FormState, value: str) -> FormState:
    # over-long text is refused, the previous description stays
    if len(value or "") > MAX_DESCRIPTION_LENGTH:
        return state
    return set_field(state, "description", value)

def choose_clinic_name(state: FormState, choice: str) -> FormState:
    """Pick a preset clinic name, or 'custom' to switch to free text."""
    if choice == "custom":
        state = set_field(state, "is_custom_clinic_name", True)
        return set_field(state, "name", "")
    state = set_field(state, "is_custom_clinic_name", False)
    return set_field(state, "name", choice or "")


# ----- plain-dict round trip -----

def _to_plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value

def state_to_dict(state: FormState) -> Dict[str, Any]:
    return _to_plain(state)

def state_from_dict(entity, arity, data: Dict[str, Any] | None) -> FormState:
    """Rebuild a FormState; keys left out take the variant template's values."""
    return record_from_dict(variant_class(entity, arity), data or {})


# Operation table used by the HTTP layer.
def _op_set_field(state, a):        return set_field(state, a["path"], a.get("value"))
def _op_set_nested(state, a):       return set_nested_field(state, a["path"], a["field"], a.get("value"))
def _op_append(state, a):           return append_item(state, a["path"], a.get("item"))
def _op_remove(state, a):           return remove_item(state, a["path"], a["index"])
def _op_replace(state, a):          return replace_item(state, a["path"], a["index"], a.get("item"))
def _op_set_item_field(state, a):   return set_item_field(state, a["path"], a["index"], a["field"], a.get("value"))
def _op_toggle_day(state, a):       return toggle_day(state, a["path"], a["index"], a["day"])
def _op_add_type(state, a):         return add_type_tag(state, a["path"], a.get("value"))
def _op_remove_type(state, a):      return remove_type_tag(state, a["path"], a.get("value"))
def _op_set_telephone(state, a):    return set_telephone(state, a["path"], a.get("value"))
def _op_set_description(state, a):  return set_description(state, a.get("value") or "")
def _op_choose_name(state, a):      return choose_clinic_name(state, a.get("value") or "")

OPERATIONS = {
    "set_field": _op_set_field,
    "set_nested_field": _op_set_nested,
    "append_item": _op_append,
    "remove_item": _op_remove,
    "replace_item": _op_replace,
    "set_item_field": _op_set_item_field,
    "toggle_day": _op_toggle_day,
    "add_type": _op_add_type,
    "remove_type": _op_remove_type,
    "set_telephone": _op_set_telephone,
    "set_description": _op_set_description,
    "choose_clinic_name": _op_choose_name,
}

def apply_operation(state: FormState, op: str, args: Dict[str, Any]) -> FormState:
    fn = OPERATIONS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operation: {op!r}")
    try:
        return fn(state, args)
    except KeyError as e:
        raise ValueError(f"Operation {op!r} is missing argument {e.args[0]!r}") from None
