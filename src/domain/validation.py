import re
from collections.abc import Mapping
from typing import Any

from src.rules.models import FieldRule, ResourceSchema

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def validate_field(rule: FieldRule, value: Any) -> str | None:
    """Return an error message for ``value`` or None when it is acceptable."""
    if _is_blank(value):
        return f"{rule.label} is required" if rule.required else None

    text = str(value).strip()

    if rule.max_length is not None and len(text) > rule.max_length:
        return f"{rule.label} cannot exceed {rule.max_length} characters"

    if rule.kind == "email" and not EMAIL_RE.match(text):
        return f"{rule.label} must be a valid email"

    if rule.kind == "number" or rule.min is not None or rule.max is not None:
        try:
            number = float(text)
        except ValueError:
            return f"{rule.label} must be a number"
        if rule.min is not None and number < rule.min:
            return f"{rule.label} must be at least {rule.min:g}"
        if rule.max is not None and number > rule.max:
            return f"{rule.label} must be at most {rule.max:g}"

    if rule.choices and text not in rule.choices:
        return f"{rule.label} must be one of: {', '.join(rule.choices)}"

    return None


def validate_form(schema: ResourceSchema, data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for rule in schema.fields:
        message = validate_field(rule, data.get(rule.name))
        if message:
            errors[rule.name] = message
    return errors


def clean_form(
    schema: ResourceSchema, data: Mapping[str, Any], clear_blank: bool = False
) -> dict[str, Any]:
    """
    Strip strings and coerce numbers before submit.
    Blank optional fields are dropped, or sent as None with ``clear_blank`` so
    an update can erase a stored value.
    """
    cleaned: dict[str, Any] = {}
    for rule in schema.fields:
        value = data.get(rule.name)
        if _is_blank(value):
            if clear_blank:
                cleaned[rule.name] = None
            continue
        if isinstance(value, str):
            value = value.strip()
        if rule.kind == "number":
            number = float(value)
            value = int(number) if number.is_integer() else number
        cleaned[rule.name] = value
    return cleaned
