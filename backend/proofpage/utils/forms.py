from typing import Any, Mapping, Optional
from flask import request

_TRUE_VALUES = {"1", "true", "on", "yes"}


def form_data() -> Mapping[str, Any]:
    """Submitted fields, from a form post or a JSON body."""
    if request.form:
        return request.form
    return request.get_json(silent=True) or {}


def text(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    return str(value).strip()


def optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    """Trimmed value, or None when missing or blank."""
    return text(data, key) or None


def flag(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_VALUES
