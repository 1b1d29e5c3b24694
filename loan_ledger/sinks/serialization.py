"""Shared serialization utilities for sinks and callers that persist records."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert a dataclass to a JSON-ready dict.

    Properties named in the class's ``DERIVED_FIELDS`` (for example an
    installment's ``outstanding_amount``) are included alongside the
    stored fields.
    """
    result = {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    for name in getattr(obj, "DERIVED_FIELDS", ()):
        result[name] = serialize_value(getattr(obj, name))
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so amounts survive the round trip exactly.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {_serialize_key(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def _serialize_key(key: Any) -> Any:
    if isinstance(key, Enum):
        return key.value
    return key
