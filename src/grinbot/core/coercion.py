from typing import Any, Optional


def coerce_id(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Coerce a chat/message identifier from a decoded payload to ``int``.

    Bools and non-integral floats are rejected since they never denote a
    real identifier.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            return default
        return int(value)
    if isinstance(value, str):
        token = value.strip()
        if not token:
            return default
        try:
            return int(token)
        except ValueError:
            return default
    return default


def coerce_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value
