"""Request payload validation.

Each resource declares its constraints as a pydantic model in
``app.schemas``; ``validate_payload`` is the one routine that checks any of
them and turns failures into a flat list of ``{"field", "message"}`` dicts.
It never raises for malformed input.
"""

import math
from typing import Any, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


def to_number(value: Any) -> Any:
    """Turn numeric text into a float; anything else is returned unchanged.

    ``None`` stays ``None`` so optional fields remain absent.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return value
        try:
            number = float(text)
        except ValueError:
            return value
        if math.isfinite(number) and number.is_integer():
            return int(number)
        return number
    return value


def coerce_numbers(raw: dict, fields) -> dict:
    payload = dict(raw)
    for name in fields:
        if name in payload:
            payload[name] = to_number(payload[name])
    return payload


def format_errors(errors) -> List[dict]:
    """Flatten pydantic error dicts into {"field", "message"} pairs."""
    return [
        {
            "field": ".".join(str(p) for p in err["loc"]) or "body",
            "message": err["msg"],
        }
        for err in errors
    ]


def validate_payload(model: Type[M], raw: Any) -> Tuple[Optional[M], List[dict]]:
    if not isinstance(raw, dict):
        return None, [{"field": "body", "message": "Request body must be a JSON object"}]

    payload = coerce_numbers(raw, getattr(model, "numeric_fields", ()))
    try:
        return model.model_validate(payload), []
    except ValidationError as exc:
        return None, format_errors(exc.errors())
