"""
Helpers for keeping secret values out of logs and dry-run output.
"""

import copy
from typing import Any

SECRET_MASK = "***"

# Manifest fields whose values are secret material
SECRET_PAYLOAD_FIELDS = ("data", "stringData")


def mask_value(value: Any, length: int = 4) -> str:
    """
    Keep the first `length` characters of a value and star the rest.

    Example:
        >>> mask_value("hunter22")
        'hunt****'
    """
    text = value if isinstance(value, str) else str(value)
    if len(text) <= length:
        return "*" * len(text)
    return text[:length] + "*" * (len(text) - length)


def censor_secret_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a Secret manifest with every data value replaced by the mask."""
    censored = copy.deepcopy(payload)
    for field in SECRET_PAYLOAD_FIELDS:
        values = censored.get(field)
        if isinstance(values, dict):
            censored[field] = {key: SECRET_MASK for key in values}
    return censored
