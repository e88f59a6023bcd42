"""Conversion of opaque path/body identifiers to store identifiers."""

import re
from typing import Any
from parcel_backend.app.core.exceptions import ValidationError

# Primary keys are 32-bit signed INTEGER columns
MAX_ID = 2**31 - 1

_ID_PATTERN = re.compile(r"[0-9]+")


def parse_id(raw: Any, field: str = "id") -> int:
    """
    Convert a client-supplied identifier into the store's integer key.

    Raises:
        ValidationError: if the value is not an integer in 1..MAX_ID
    """
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {field} format", details={"field": field})
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip() if raw is not None else ""
        if not _ID_PATTERN.fullmatch(text):
            raise ValidationError(f"Invalid {field} format", details={"field": field, "value": raw})
        value = int(text)
    if not 0 < value <= MAX_ID:
        raise ValidationError(f"Invalid {field} format", details={"field": field, "value": str(raw)})
    return value
