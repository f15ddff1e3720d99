#!/usr/bin/env python3
"""
Physical geometry of a swipe keyboard.

A keyboard is a grid of cells (rows x cols). Every cell holds a fixed number
of sub-positions: one tap and the remaining swipe directions. A linear
position index encodes the triple as

    position = (row * cols + col) * subpositions + subpos

The standard 3x6 variant looks like this (sub-position 4 is the tap, swipes
0-3 point to the corners):

         col 0    col 1         col 5
         2   3 |  7   8 | ... | 27  28
  row 0    4   |    9   | ... |   29
         1   0 |  6   5 | ... | 26  25

Coordinates use the screen orientation: x is the column, y is the row and
grows downward. Swipe angles are measured clockwise from east, so
sub-position 0 above points south-east.

Keyboard variants differ only in the numbers passed to Geometry; they are
loaded from the YAML configuration (see config_loader.py).
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple


@dataclass(frozen=True)
class Geometry:
    """
    Data description of one keyboard variant.

    reserved_cells are structural cells (shift, backspace, ...) that never
    hold characters. When space_coordinates is set, the keyboard has a space
    bar at the reserved position ``size`` (one past the grid).
    """

    name: str
    rows: int
    cols: int
    subpositions: int
    tap_subposition: int
    phase_offset: float = 0.0
    reserved_cells: Tuple[Tuple[int, int], ...] = ()
    space_coordinates: Optional[Tuple[float, float]] = None
    swipe_distance: float = 0.5
    context_sensitive_swipes: bool = False
    left_columns: int = 0
    char_range: int = 128
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Geometry '{self.name}' needs at least one row and column")
        if self.subpositions < 1:
            raise ValueError(f"Geometry '{self.name}' needs at least one sub-position per cell")
        if not 0 <= self.tap_subposition < self.subpositions:
            raise ValueError(
                f"Tap sub-position {self.tap_subposition} outside [0, {self.subpositions})"
            )
        for row, col in self.reserved_cells:
            if not (0 <= row < self.rows and 0 <= col < self.cols):
                raise ValueError(f"Reserved cell ({row}, {col}) outside the {self.rows}x{self.cols} grid")
        if self.swipe_distance <= 0:
            raise ValueError("swipe_distance must be positive")

    @classmethod
    def from_config(cls, name: str, config: Dict[str, Any]) -> 'Geometry':
        """
        Build a geometry from the 'geometry' section of a keyboard config.

        Args:
            name: Keyboard name
            config: Geometry settings (rows, cols, subpositions, ...)

        Returns:
            Geometry instance

        Raises:
            ValueError: If a required setting is missing or invalid
        """
        missing = [key for key in ('rows', 'cols', 'subpositions', 'tap_subposition')
                   if key not in config]
        if missing:
            raise ValueError(f"Geometry for '{name}' is missing settings: {missing}")

        cols = int(config['cols'])
        space = config.get('space')

        return cls(
            name=name,
            rows=int(config['rows']),
            cols=cols,
            subpositions=int(config['subpositions']),
            tap_subposition=int(config['tap_subposition']),
            phase_offset=float(config.get('phase_offset', 0.0)),
            reserved_cells=tuple((int(r), int(c)) for r, c in config.get('reserved_cells', [])),
            space_coordinates=(float(space[0]), float(space[1])) if space is not None else None,
            swipe_distance=float(config.get('swipe_distance', 0.5)),
            context_sensitive_swipes=bool(config.get('context_sensitive_swipes', False)),
            left_columns=int(config.get('left_columns', cols // 2)),
            char_range=int(config.get('char_range', 128)),
            description=config.get('description', ''),
        )

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of grid positions (length of a layout)."""
        return self.rows * self.cols * self.subpositions

    @property
    def swipe_directions(self) -> int:
        return self.subpositions - 1

    @property
    def sector(self) -> float:
        """Angular width (radians) owned by one swipe direction."""
        return 2.0 * math.pi / self.swipe_directions

    @property
    def has_space(self) -> bool:
        return self.space_coordinates is not None

    @property
    def space_position(self) -> Optional[int]:
        return self.size if self.has_space else None

    # ------------------------------------------------------------------
    # Position encoding
    # ------------------------------------------------------------------

    def _check(self, position: int) -> None:
        if not 0 <= position < self.size:
            raise ValueError(f"Position {position} outside [0, {self.size}) for '{self.name}'")

    def decompose(self, position: int) -> Tuple[int, int, int]:
        """Split a grid position into (row, col, subpos)."""
        self._check(position)
        cell, subpos = divmod(position, self.subpositions)
        row, col = divmod(cell, self.cols)
        return row, col, subpos

    def compose(self, row: int, col: int, subpos: int) -> int:
        """Inverse of decompose."""
        if not (0 <= row < self.rows and 0 <= col < self.cols and 0 <= subpos < self.subpositions):
            raise ValueError(f"({row}, {col}, {subpos}) is not a valid location for '{self.name}'")
        return (row * self.cols + col) * self.subpositions + subpos

    def is_space(self, position: int) -> bool:
        return self.has_space and position == self.size

    def is_tap(self, position: int) -> bool:
        if self.is_space(position):
            return True
        return self.decompose(position)[2] == self.tap_subposition

    def is_reserved(self, position: int) -> bool:
        row, col, _ = self.decompose(position)
        return (row, col) in self.reserved_cells

    def letter_positions(self) -> List[int]:
        """All grid positions outside reserved cells, in increasing order."""
        return [pos for pos in range(self.size) if not self.is_reserved(pos)]

    def cell_positions(self, row: int, col: int) -> List[int]:
        start = self.compose(row, col, 0)
        return list(range(start, start + self.subpositions))

    # ------------------------------------------------------------------
    # Hands
    # ------------------------------------------------------------------

    def hand(self, position: int) -> Optional[str]:
        """'L' or 'R' for the thumb that types a position; None for space."""
        if self.is_space(position):
            return None
        col = self.decompose(position)[1]
        return 'L' if col < self.left_columns else 'R'

    def same_hand(self, position1: int, position2: int) -> bool:
        hand1 = self.hand(position1)
        return hand1 is not None and hand1 == self.hand(position2)

    def swipe_is_good_for_hand(self, position: int) -> bool:
        """Even directions suit the left thumb, odd directions the right."""
        good_for_left = self.direction_index(position) % 2 == 0
        return good_for_left == (self.hand(position) == 'L')

    # ------------------------------------------------------------------
    # Coordinates and swipes
    # ------------------------------------------------------------------

    def coordinates(self, position: int) -> Tuple[float, float]:
        """Centre of the cell holding a position as (x, y)."""
        if self.is_space(position):
            return self.space_coordinates
        row, col, _ = self.decompose(position)
        return float(col), float(row)

    def direction_index(self, position: int) -> int:
        """Swipe direction index in [0, swipe_directions)."""
        if self.is_tap(position):
            raise ValueError(f"Position {position} is a tap, not a swipe")
        subpos = self.decompose(position)[2]
        return subpos if subpos < self.tap_subposition else subpos - 1

    def _direction_subposition(self, direction: int) -> int:
        direction %= self.swipe_directions
        return direction if direction < self.tap_subposition else direction + 1

    def swipe_angle(self, position: int) -> float:
        """Nominal swipe angle in radians."""
        direction = self.direction_index(position)
        return (direction / self.swipe_directions + self.phase_offset) * 2.0 * math.pi

    def swipe_arc(self, position: int, layout=None) -> Tuple[float, float]:
        """
        Effective (angle, arc) of a swipe.

        With context-sensitive swipes, every neighboring direction of the same
        cell that is empty in ``layout`` widens the arc by half a sector on
        its side, and the angle moves to the middle of the widened arc.
        """
        angle = self.swipe_angle(position)
        sector = self.sector
        if not self.context_sensitive_swipes or layout is None or self.swipe_directions < 2:
            return angle, sector

        row, col, _ = self.decompose(position)
        direction = self.direction_index(position)
        cell_start = self.compose(row, col, 0)

        lower = angle - sector / 2.0
        upper = angle + sector / 2.0
        if layout[cell_start + self._direction_subposition(direction + 1)] is None:
            upper += sector / 2.0
        if layout[cell_start + self._direction_subposition(direction - 1)] is None:
            lower -= sector / 2.0

        return (lower + upper) / 2.0, upper - lower

    def swipe_endpoint(self, position: int, layout=None) -> Tuple[float, float]:
        """Coordinates where a swipe ends."""
        angle, _ = self.swipe_arc(position, layout)
        x, y = self.coordinates(position)
        return (x + self.swipe_distance * math.cos(angle),
                y + self.swipe_distance * math.sin(angle))

    def swipe_width(self, position: int, layout=None) -> float:
        """Chord of the effective arc at the swipe distance."""
        _, arc = self.swipe_arc(position, layout)
        return 2.0 * self.swipe_distance * math.sin(min(arc, math.pi) / 2.0)

    def target_width(self, position: int, layout=None) -> float:
        """Fitts's-Law target width: 1 for taps, the swipe width otherwise."""
        if self.is_tap(position):
            return 1.0
        return self.swipe_width(position, layout)

    def effective_coordinates(self, position: int, layout=None) -> Tuple[float, float]:
        """Where the thumb rests after typing a position."""
        if self.is_tap(position):
            return self.coordinates(position)
        return self.swipe_endpoint(position, layout)
