from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


@dataclass(frozen=True, slots=True)
class Color:
    """RGBA color with 0-255 channels.

    `str()` gives a hex form used in debug output and API responses.
    """

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def is_transparent(self) -> bool:
        return self.a == 0

    @staticmethod
    def from_hex(value: str) -> "Color":
        m = _HEX_RE.match(value.strip())
        if not m:
            raise ValueError(f"Invalid color: {value!r}")
        digits = m.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        return Color(*channels)

    @staticmethod
    def coerce(value: Any) -> "Color":
        """Accept a Color, a hex string, or an (r, g, b[, a]) sequence."""

        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            return Color.from_hex(value)
        if isinstance(value, (tuple, list)) and len(value) in (3, 4):
            return Color(*(int(c) for c in value))
        raise ValueError(f"Invalid color: {value!r}")

    def __str__(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


# No-border marker for characters.
TRANSPARENT = Color(0, 0, 0, 0)

WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)
