"""Enriched lookup response."""

from __future__ import annotations

import copy
from typing import Any


class Details:
    """Attribute-style view over an enriched lookup payload.

    Every key of the payload is readable as an attribute; the full
    dictionary is available as ``all``. Missing keys raise AttributeError.

    Example:
        >>> details = Details({"ip": "8.8.8.8", "country": "US"})
        >>> details.country
        'US'
        >>> details.all["ip"]
        '8.8.8.8'
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, Any]) -> None:
        object.__setattr__(self, "_data", dict(data))

    @property
    def all(self) -> dict[str, Any]:
        """Copy of the underlying payload."""
        return dict(self._data)

    @property
    def bogon(self) -> bool:
        return bool(self._data.get("bogon", False))

    def __getattr__(self, name: str) -> Any:
        if name == "_data":
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            msg = f"{name!r} is not a field of this lookup response"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        msg = "Details is read-only"
        raise AttributeError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Details):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __reduce__(self) -> tuple[type[Details], tuple[dict[str, Any]]]:
        return (Details, (self._data,))

    def __copy__(self) -> Details:
        return Details(self._data)

    def __deepcopy__(self, memo: dict[int, Any]) -> Details:
        return Details(copy.deepcopy(self._data, memo))

    def __repr__(self) -> str:
        return f"Details({self._data!r})"
