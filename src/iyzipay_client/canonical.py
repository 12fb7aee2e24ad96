"""Bracket/equals serialization used by the legacy (V1) authentication.

The gateway's V1 scheme hashes a custom rendering of the request payload:

- mappings become ``[key=value,key2=value2]`` (comma, no space);
- sequences become ``[a, b]`` (comma followed by one space);
- ``None`` values inside mappings are skipped entirely;
- everything else is rendered through its string form, unquoted.

The format is not JSON and must be reproduced byte for byte. V2 signing
hashes the JSON body instead, so nothing on the live request path calls this
module; it is kept for callers that still speak V1.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

__all__ = ["build_canonical_string"]


def build_canonical_string(value: object) -> str:
    """Return the canonical string for ``value``.

    Mapping keys are emitted in iteration order. Pydantic models are dumped
    by alias in field order first. Cyclic input recurses until Python's
    recursion limit; callers must not pass it.

    Examples:
        >>> build_canonical_string({"a": 1, "b": None, "d": 0})
        '[a=1,d=0]'
        >>> build_canonical_string({"items": ["x", "y"]})
        '[items=[x, y]]'
    """

    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(build_canonical_string(item) for item in value) + "]"

    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)

    if isinstance(value, Mapping):
        parts = [
            f"{key}={build_canonical_string(item)}"
            for key, item in value.items()
            if item is not None
        ]
        return "[" + ",".join(parts) + "]"

    return _render_primitive(value)


def _render_primitive(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _render_primitive(value.value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _render_float(value)
    return str(value)


def _render_float(value: float) -> str:
    """Render a finite float the way the gateway's JavaScript runtime does.

    Magnitudes in ``[1e-6, 1e21)`` use plain notation, and integral values
    drop their ``.0``. Anything outside uses ``1e+21`` / ``1e-7`` exponents.
    """

    if value == 0:
        return "0"
    if 1e-6 <= abs(value) < 1e21:
        if value.is_integer():
            return str(int(value))
        text = repr(value)
        return format(Decimal(text), "f") if "e" in text else text
    mantissa, _, exponent = repr(value).partition("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
