#!/usr/bin/env python3
"""
Exhaustive neighbor layouts reachable by one or two swaps.
"""

import logging
from collections import Counter
from itertools import combinations
from typing import Iterator, List, Optional, Tuple

from keyswipe.layout import Layout

logger = logging.getLogger(__name__)

Swap = Tuple[int, int]


def eligible_swaps(layout: Layout, same_class: bool = False) -> List[Swap]:
    """
    Every unordered pair of non-reserved positions, in lexicographic order.

    Pairs of two empty slots are dropped because swapping them changes
    nothing. With ``same_class``, taps only pair with taps and swipes with
    swipes.
    """
    geometry = layout.geometry
    swaps = []
    for i, j in combinations(geometry.letter_positions(), 2):
        if layout[i] is None and layout[j] is None:
            continue
        if same_class and geometry.is_tap(i) != geometry.is_tap(j):
            continue
        swaps.append((i, j))
    return swaps


class LayoutPermutations:
    """
    Iterator over the neighbors of a base layout.

    With ``num_swaps=1`` every eligible swap is applied on its own. With
    ``num_swaps=2`` every pair (a, b) of eligible swaps with a before b and no
    position in common is applied. Swaps are kept within the tap/swipe class
    by default when two swaps are combined. Each neighbor is a fresh copy of
    the base layout.
    """

    def __init__(self, layout: Layout, num_swaps: int = 1, same_class: Optional[bool] = None):
        if num_swaps not in (1, 2):
            raise ValueError(f"num_swaps must be 1 or 2, got {num_swaps}")
        if same_class is None:
            same_class = num_swaps > 1

        self.orig_layout = layout.copy()
        self.num_swaps = num_swaps
        self.same_class = same_class
        self.swaps = eligible_swaps(layout, same_class)
        self.index = 0
        self._size = self._count_operations()
        self._operations = self._iter_operations()

        logger.debug("Neighborhood of %d layouts (%d swaps, %d-swap moves, same_class=%s)",
                     self._size, len(self.swaps), num_swaps, same_class)

    def _count_operations(self) -> int:
        n = len(self.swaps)
        if self.num_swaps == 1:
            return n
        # Two distinct swaps overlap in at most one position
        degree = Counter(pos for swap in self.swaps for pos in swap)
        overlapping = sum(d * (d - 1) // 2 for d in degree.values())
        return n * (n - 1) // 2 - overlapping

    def _iter_operations(self) -> Iterator[Tuple[Swap, ...]]:
        if self.num_swaps == 1:
            for swap in self.swaps:
                yield (swap,)
            return

        for a, first in enumerate(self.swaps):
            for second in self.swaps[a + 1:]:
                if first[0] in second or first[1] in second:
                    continue
                yield first, second

    def __iter__(self) -> 'LayoutPermutations':
        return self

    def __next__(self) -> Layout:
        operation = next(self._operations)
        layout = self.orig_layout.copy()
        for i, j in operation:
            layout.swap(i, j)
        self.index += 1
        return layout

    def __len__(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        return self._size - self.index
