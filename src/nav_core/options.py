# src/nav_core/options.py
"""
Option flag decoding.

Navigation calls take an untyped options list; the first entry, when
present, is the bitmask forwarded to the bot subsystem. The bits are
opaque here.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional, Sequence

from .errors import InvalidOptionsError

# Script integers are signed 32-bit; the bitmask is their unsigned view.
FLAG_MASK = 0xFFFFFFFF


def coerce_script_int(value: Any) -> Optional[int]:
    """Script-list style integer coercion; None if not convertible."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            as_float = float(text)
        except ValueError:
            return None
        return int(as_float) if math.isfinite(as_float) else None
    return None


def decode_option_flags(
    options: Optional[Sequence[Any]],
    *,
    required: bool = False,
    on_invalid: Optional[Callable[[Any], None]] = None,
) -> int:
    """
    Return options[0] as a non-negative flag bitmask.

    - No options (None or empty): 0, or InvalidOptionsError if `required`.
    - Non-convertible first entry: 0, reported through `on_invalid`.
    - Negative values keep their 32-bit pattern (-1 -> 0xFFFFFFFF).
    """
    if not options:
        if required:
            raise InvalidOptionsError(
                code="missing_option_flags",
                details={"options": list(options or [])},
            )
        return 0

    value = coerce_script_int(options[0])
    if value is None:
        if on_invalid is not None:
            on_invalid(options[0])
        return 0

    flags = 0
    flags |= value & FLAG_MASK
    return flags
