#!/usr/bin/env python3
"""
Keyboard layouts: an assignment of characters to the positions of a Geometry.

Slots hold a single character or None (empty). The space character is never
stored in a layout; it lives at the geometry's reserved space position.
"""

import logging
import math
import random
from collections import Counter
from typing import Iterable, Iterator, List, Optional, Sequence

from keyswipe.exceptions import LayoutError
from keyswipe.geometry import Geometry
from keyswipe.position_map import PositionMap

logger = logging.getLogger(__name__)

DEFAULT_EMPTY_MARKER = '·'

# sin(pi/8): projections below this count as "straight" when placing a swipe
# direction in the 3x3 grid drawn for each cell
_DIRECTION_THRESHOLD = math.sin(math.pi / 8)


class Layout:
    """
    Fixed-length sequence of Optional[str] indexed by position.

    Layouts are value types: copy() is cheap and equality/hash only depend on
    the geometry name and the slot contents.
    """

    __slots__ = ('geometry', 'keys')

    def __init__(self, geometry: Geometry, keys: Iterable[Optional[str]]):
        self.geometry = geometry
        self.keys: List[Optional[str]] = list(keys)

        if len(self.keys) != geometry.size:
            raise LayoutError(
                f"Layout for '{geometry.name}' needs {geometry.size} slots, got {len(self.keys)}"
            )

        for pos, char in enumerate(self.keys):
            if char is None:
                continue
            if not isinstance(char, str) or len(char) != 1:
                raise LayoutError(f"Slot {pos} must hold a single character, got {char!r}")
            if char == ' ':
                raise LayoutError(f"Slot {pos}: the space character has a reserved position")
            if geometry.is_reserved(pos):
                row, col, _ = geometry.decompose(pos)
                raise LayoutError(f"Slot {pos} belongs to reserved cell ({row}, {col}) but holds {char!r}")

    @classmethod
    def from_cells(cls, geometry: Geometry, rows: Sequence[Sequence[str]],
                   empty_marker: str = DEFAULT_EMPTY_MARKER) -> 'Layout':
        """
        Build a layout from a grid of cell strings.

        Args:
            geometry: Keyboard geometry
            rows: One list per grid row, one string per cell; each string has
                one character per sub-position, in sub-position order
            empty_marker: Character denoting an empty slot

        Returns:
            Layout instance

        Raises:
            LayoutError: If the grid shape does not match the geometry
        """
        if len(rows) != geometry.rows:
            raise LayoutError(f"Expected {geometry.rows} rows for '{geometry.name}', got {len(rows)}")

        keys: List[Optional[str]] = []
        for row_index, row in enumerate(rows):
            if len(row) != geometry.cols:
                raise LayoutError(
                    f"Row {row_index} of '{geometry.name}' needs {geometry.cols} cells, got {len(row)}"
                )
            for col_index, cell in enumerate(row):
                if len(cell) != geometry.subpositions:
                    raise LayoutError(
                        f"Cell ({row_index}, {col_index}) needs {geometry.subpositions} "
                        f"characters, got {cell!r}"
                    )
                keys.extend(None if char == empty_marker else char for char in cell)

        return cls(geometry, keys)

    def to_cells(self, empty_marker: str = DEFAULT_EMPTY_MARKER) -> List[List[str]]:
        """Inverse of from_cells."""
        g = self.geometry
        rows = []
        for row in range(g.rows):
            cells = []
            for col in range(g.cols):
                cells.append(''.join(self.keys[pos] or empty_marker for pos in g.cell_positions(row, col)))
            rows.append(cells)
        return rows

    def layout_string(self, empty_marker: str = DEFAULT_EMPTY_MARKER) -> str:
        """Compact one-line form: all slots in position order."""
        return ''.join(char or empty_marker for char in self.keys)

    # ------------------------------------------------------------------
    # Sequence protocol and value semantics
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.keys)

    def __getitem__(self, position: int) -> Optional[str]:
        return self.keys[position]

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter(self.keys)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Layout):
            return NotImplemented
        return self.geometry.name == other.geometry.name and self.keys == other.keys

    def __hash__(self) -> int:
        return hash((self.geometry.name, tuple(self.keys)))

    def __repr__(self) -> str:
        return f"Layout({self.geometry.name!r}, {self.layout_string()!r})"

    def copy(self) -> 'Layout':
        clone = Layout.__new__(Layout)
        clone.geometry = self.geometry
        clone.keys = list(self.keys)
        return clone

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def swap(self, i: int, j: int) -> None:
        """Swap two slots in place."""
        self.keys[i], self.keys[j] = self.keys[j], self.keys[i]

    def swapped(self, *pairs) -> 'Layout':
        """Return a copy with each (i, j) pair swapped in order."""
        clone = self.copy()
        for i, j in pairs:
            clone.swap(i, j)
        return clone

    def shuffle(self, times: int, rng: Optional[random.Random] = None) -> None:
        """Apply ``times`` random swaps between non-reserved slots."""
        rng = rng or random.Random()
        positions = self.geometry.letter_positions()
        for _ in range(times):
            self.swap(rng.choice(positions), rng.choice(positions))

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    def characters(self) -> Counter:
        """Multiset of characters held by the layout."""
        return Counter(char for char in self.keys if char is not None)

    def validate(self, required_chars: Optional[str] = None) -> PositionMap:
        """
        Check the character/position bijection and build the position map.

        Args:
            required_chars: Characters that must all be present

        Returns:
            PositionMap for this layout

        Raises:
            LayoutError: If a character appears more than once
            MissingCharacterError: If a required character is missing
        """
        duplicates = sorted(char for char, count in self.characters().items() if count > 1)
        if duplicates:
            raise LayoutError(f"Characters placed more than once: {duplicates}")

        position_map = PositionMap.build(self, required_chars)
        logger.debug("Layout for '%s' covers %d characters", self.geometry.name, len(position_map))
        return position_map

    def position_map(self) -> PositionMap:
        return PositionMap.build(self)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _cell_grid(self, row: int, col: int) -> List[List[str]]:
        g = self.geometry
        grid = [[' '] * 3 for _ in range(3)]
        if (row, col) in g.reserved_cells:
            return grid

        for pos in g.cell_positions(row, col):
            char = self.keys[pos] or ' '
            if g.is_tap(pos):
                grid[1][1] = char
                continue
            angle = g.swipe_angle(pos)
            dx, dy = math.cos(angle), math.sin(angle)
            x = 1 + (dx > _DIRECTION_THRESHOLD) - (dx < -_DIRECTION_THRESHOLD)
            y = 1 + (dy > _DIRECTION_THRESHOLD) - (dy < -_DIRECTION_THRESHOLD)
            grid[y][x] = char
        return grid

    def render(self) -> str:
        """
        Draw the layout as a grid: every cell is three lines high with the
        tap in the middle and each swipe in the direction it points to.
        """
        g = self.geometry
        lines = []
        separator = ' '.join(['-------'] * g.cols)

        for row in range(g.rows):
            grids = [self._cell_grid(row, col) for col in range(g.cols)]
            for line in range(3):
                lines.append(''.join(f" {grid[line][0]} {grid[line][1]} {grid[line][2]} |" for grid in grids))
            lines.append(separator)

        if g.has_space:
            lines.append('[ space ]'.center(8 * g.cols).rstrip())

        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.render()
