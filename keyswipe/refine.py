#!/usr/bin/env python3
"""
Greedy local refinement of a layout.

Each round scores every neighbor of the layouts currently kept and retains
the ``top`` cheapest layouts seen in that round (the kept layouts included).
The search stops when a round does not change the retained set, or after
``max_rounds`` rounds. Only the retained layouts are held in memory, so
two-swap neighborhoods of millions of layouts can be streamed through.
"""

import bisect
import logging
from typing import List, Optional, Set, Tuple

from keyswipe.layout import Layout
from keyswipe.neighbors import LayoutPermutations
from keyswipe.penalty import PenaltyModel
from keyswipe.quartads import QuartadTable

logger = logging.getLogger(__name__)

ScoredLayout = Tuple[float, Layout]


class TopLayouts:
    """
    The ``size`` cheapest distinct layouts offered so far.

    Entries are ordered by (score, layout string) so ties resolve the same
    way on every run.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"top must be at least 1, got {size}")
        self.size = size
        self._entries: List[Tuple[float, str, Layout]] = []
        self._keys: Set[str] = set()

    def offer(self, score: float, layout: Layout) -> bool:
        """Insert a layout if it ranks among the best; return True if kept."""
        key = layout.layout_string()
        if key in self._keys:
            return False
        if len(self._entries) == self.size and (score, key) >= self._entries[-1][:2]:
            return False

        bisect.insort(self._entries, (score, key, layout))
        self._keys.add(key)
        if len(self._entries) > self.size:
            _, dropped, _ = self._entries.pop()
            self._keys.discard(dropped)
        return True

    def layouts(self) -> List[ScoredLayout]:
        return [(score, layout) for score, _, layout in self._entries]

    def keys(self) -> List[str]:
        return [key for _, key, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


def refine_layout(quartads: QuartadTable,
                  layout: Layout,
                  model: PenaltyModel,
                  top: int = 1,
                  num_swaps: int = 1,
                  max_rounds: Optional[int] = None) -> List[ScoredLayout]:
    """
    Search the swap neighborhood of ``layout`` for cheaper layouts.

    Args:
        quartads: Compiled corpus
        layout: Starting layout
        model: Penalty model for the layout's geometry
        top: Number of layouts to keep between rounds
        num_swaps: Swaps per neighbor (1 or 2)
        max_rounds: Stop after this many rounds (None = until no change)

    Returns:
        The retained (total, layout) pairs, cheapest first
    """
    kept = TopLayouts(top)
    kept.offer(model.score_corpus(quartads, layout)[0], layout)
    logger.info("Initial penalty: %.6f", kept.layouts()[0][0])

    rounds = 0
    while max_rounds is None or rounds < max_rounds:
        rounds += 1

        candidates = TopLayouts(top)
        for score, base in kept.layouts():
            candidates.offer(score, base)

        scored = 0
        for _, base in kept.layouts():
            neighbors = LayoutPermutations(base, num_swaps)
            logger.debug("Round %d: scoring %d neighbors", rounds, len(neighbors))
            for neighbor in neighbors:
                candidates.offer(model.score_corpus(quartads, neighbor)[0], neighbor)
                scored += 1

        logger.info("Round %d: best penalty %.6f (%d layouts scored)",
                    rounds, candidates.layouts()[0][0], scored)

        if candidates.keys() == kept.keys():
            break
        kept = candidates

    return kept.layouts()
