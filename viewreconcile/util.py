"""Small helpers shared across the package."""

from __future__ import annotations

import dataclasses
import enum
import json
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def map_list(func: Callable[[T], U], items: Iterable[T]) -> list[U]:
    """Apply ``func`` to every item and return the results as a list."""
    return [func(item) for item in items]


def _encode_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"cannot encode {type(value).__name__}")


def stringify(value: Any) -> str:
    """Return a compact JSON rendering of ``value``, or its repr if it cannot be encoded."""
    try:
        return json.dumps(
            value,
            default=_encode_default,
            sort_keys=True,
            separators=(",", ":"),
            allow_nan=False,
        )
    except (TypeError, ValueError):
        return repr(value)