#!/usr/bin/env python3
"""
Character to position index for one layout.
"""

from typing import Dict, Optional

from keyswipe.exceptions import MissingCharacterError


class PositionMap:
    """
    Read-only inverse of a Layout: character -> position.

    Built in O(layout size), queried in O(1). Characters whose code point is
    outside the geometry's char_range are never present.
    """

    __slots__ = ('_positions', 'char_range')

    def __init__(self, positions: Dict[str, int], char_range: int = 128):
        self._positions = positions
        self.char_range = char_range

    @classmethod
    def build(cls, layout, required_chars: Optional[str] = None) -> 'PositionMap':
        """
        Build the position map of a layout.

        Args:
            layout: Layout to invert
            required_chars: If given, every one of these characters must be
                present (checked once for reference layouts)

        Returns:
            PositionMap instance

        Raises:
            MissingCharacterError: Naming the first missing required character
        """
        geometry = layout.geometry
        char_range = geometry.char_range
        positions: Dict[str, int] = {}

        if geometry.has_space:
            positions[' '] = geometry.space_position

        for pos, char in enumerate(layout):
            if char is not None and ord(char) < char_range:
                positions[char] = pos

        if required_chars:
            for char in required_chars:
                if char not in positions:
                    raise MissingCharacterError(char)

        return cls(positions, char_range)

    def lookup(self, char: str) -> Optional[int]:
        """Position of a character, or None when it is not on the keyboard."""
        if ord(char) >= self.char_range:
            return None
        return self._positions.get(char)

    def __contains__(self, char: str) -> bool:
        return self.lookup(char) is not None

    def __len__(self) -> int:
        return len(self._positions)
