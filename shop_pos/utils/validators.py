from typing import Any


def require_non_negative(v: int, name: str = "value") -> None:
    if v < 0:
        raise ValueError(f"{name} must be >= 0")


def require_int(v: Any, name: str = "value") -> int:
    # bool is an int subclass, but never a valid price or count
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{name} must be an integer, got {v!r}")
    return v


def require_text(v: Any, name: str = "value") -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return v.strip()
