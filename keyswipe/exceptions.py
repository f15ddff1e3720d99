#!/usr/bin/env python3
"""
Exceptions raised while building or validating keyboard layouts.
"""


class LayoutError(ValueError):
    """A layout does not satisfy the character/position bijection."""


class MissingCharacterError(LayoutError):
    """A required character has no position in the reference layout."""

    def __init__(self, char: str):
        self.char = char
        super().__init__(f"missing char: {char!r}")
