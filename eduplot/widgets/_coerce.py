from __future__ import annotations

from typing import Any, Mapping


def require(raw: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return raw[key]
    except KeyError as exc:
        raise ValueError(f"{where} missing required field: {key}") from exc


def coerce_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)


def coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return value


def coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def coerce_optional_str(value: object, field_name: str) -> str | None:
    if value is None:
        return None
    return coerce_str(value, field_name) or None


def coerce_list(value: object, field_name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    return value


def coerce_mapping(value: object, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{field_name} must be a table/object")
    return value
