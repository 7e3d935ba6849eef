"""Exception types shared by config, color and layout resolution."""

from __future__ import annotations


class StyleConfigError(ValueError):
    """Raised when a style configuration violates a structural invariant."""


class ColorParseError(ValueError):
    """Raised when a configured color string is not a valid color spec."""

    def __init__(self, key: str, value: object) -> None:
        super().__init__(f"invalid color for {key!r}: {value!r}")
        self.key = key
        self.value = value


class LayoutError(ValueError):
    """Raised when an item cannot be laid out (missing or empty geometry)."""
