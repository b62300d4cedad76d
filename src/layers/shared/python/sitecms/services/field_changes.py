"""Applying one field-level change to one section.

A change names a dotted path inside the section (``headline``,
``backgroundImage.src``, ``features.0.title``) using stored camelCase names.
The section is dumped, the value written at the path, and the result
revalidated through the section's variant model, so a change can never leave
a section in a shape its model would reject.
"""

import json
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from sitecms.models.change import FieldChange, FieldType
from sitecms.models.section import SectionBase
from sitecms.utils.exceptions import ValidationError

# Structural fields owned by the state machine, never by field edits.
PROTECTED_FIELDS = {"id", "type", "order"}

_MISSING = object()

_INDEX_PATTERN = re.compile(r"[0-9]+")


def _is_index(segment: str) -> bool:
    """True for a plain ASCII list index such as ``0`` or ``12``."""
    return bool(_INDEX_PATTERN.fullmatch(segment))


def _declared_fields(model: type[SectionBase]) -> dict[str, str]:
    """Map every accepted spelling of a model field to its stored alias."""
    names: dict[str, str] = {}
    for name, info in model.model_fields.items():
        alias = info.alias or to_camel(name)
        names[name] = alias
        names[alias] = alias
    return names


def get_path(data: Any, path: list[str]) -> Any:
    """Read the value at ``path``, or ``_MISSING``."""
    current = data
    for segment in path:
        if isinstance(current, dict):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, list):
            if not _is_index(segment) or int(segment) >= len(current):
                return _MISSING
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def set_path(data: dict[str, Any], path: list[str], value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate objects as needed.

    Raises:
        ValidationError: If the path walks through a scalar or past the end
            of a list.
    """
    current: Any = data
    for depth, segment in enumerate(path[:-1]):
        next_segment = path[depth + 1]
        if isinstance(current, list):
            if not _is_index(segment) or int(segment) >= len(current):
                raise ValidationError(f"List index '{segment}' out of range")
            if current[int(segment)] is None:
                current[int(segment)] = {}
            current = current[int(segment)]
            continue
        if not isinstance(current, dict):
            raise ValidationError(f"Cannot set '{'.'.join(path)}': '{segment}' is not an object")
        if current.get(segment) is None:
            current[segment] = [] if _is_index(next_segment) else {}
        current = current[segment]

    last = path[-1]
    if isinstance(current, list):
        if not _is_index(last) or int(last) > len(current):
            raise ValidationError(f"List index '{last}' out of range")
        if int(last) == len(current):
            current.append(value)
        else:
            current[int(last)] = value
    elif isinstance(current, dict):
        current[last] = value
    else:
        raise ValidationError(f"Cannot set '{'.'.join(path)}': parent is not an object")


def coerce_value(field_type: FieldType | str, current: Any, value: Any) -> Any:
    """Interpret a submitted value according to its field type.

    Raises:
        ValidationError: If the value does not fit the field type.
    """
    field_type = FieldType(field_type)

    if field_type in (FieldType.TEXT, FieldType.HTML):
        if not isinstance(value, str):
            raise ValidationError(f"{field_type.value} value must be a string")
        return value

    if field_type == FieldType.IMAGE:
        if isinstance(value, dict):
            if isinstance(current, dict):
                return {**current, **value}
            return value
        if not isinstance(value, str) or not value:
            raise ValidationError("image value must be a URL string or an image object")
        if isinstance(current, dict):
            return {**current, "src": value}
        return value

    # json
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON value: {e.msg}")
    if isinstance(value, (dict, list, int, float, bool)) or value is None:
        return value
    raise ValidationError("json value must be JSON-serializable")


def apply_field_change(section: SectionBase, change: FieldChange) -> SectionBase:
    """Return a new section with ``change`` applied.

    The input section is never mutated.

    Raises:
        ValidationError: If the path is protected or undeclared, or the new
            value makes the section invalid.
    """
    model = type(section)
    path = change.key.field_path
    declared = _declared_fields(model)

    if not all(path):
        raise ValidationError(f"Field key '{change.field_key}' has an empty path segment")
    if path[0] in PROTECTED_FIELDS:
        raise ValidationError(f"Field '{path[0]}' cannot be edited directly")

    data = section.model_dump(mode="json", by_alias=True)
    if path[0] in declared:
        path = [declared[path[0]], *path[1:]]
    elif path[0] not in data:
        raise ValidationError(f"Section type '{section.type}' has no field '{path[0]}'")

    current = get_path(data, path)
    new_value = coerce_value(change.field_type, None if current is _MISSING else current, change.value)
    set_path(data, path, new_value)

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError([
            {
                "field": change.key.token,
                "message": f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}",
            }
            for err in e.errors()
        ])
