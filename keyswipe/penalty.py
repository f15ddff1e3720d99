#!/usr/bin/env python3
"""
Penalty (cost) model for swipe keyboard layouts.

Every quartad is charged for the character it ends with, given up to three
characters of history:

  - base: fixed ergonomic cost of the cell (no history)
  - swipe: flat cost of a swipe, plus a surcharge when the direction is
    awkward for the thumb typing it (no history)
  - travel: Fitts's-Law time to move from the previous key to this one
  - swipe completion: time to finish the previous key when it was a swipe
  - alternating hand: bonus for strict alternation over three keys
  - same hand skip one: weighted travel from two keys back when the key in
    between was typed by the other thumb
  - alternating hand 4: bonus for strict alternation over four keys
  - same hand skip two: weighted travel from three keys back across two
    keys typed by the other thumb

Fitts's Law: t = max(A, log2(distance / width + 1) / k).

Terms whose history is not available are skipped. All costs are multiplied by
the quartad's count. Lower totals are better.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, NamedTuple, Optional, Tuple

import numpy as np

from keyswipe.geometry import Geometry
from keyswipe.position_map import PositionMap
from keyswipe.quartads import QuartadTable

logger = logging.getLogger(__name__)


class KeyPenalty(NamedTuple):
    name: str
    description: str


PENALTY_TERMS: Tuple[KeyPenalty, ...] = (
    KeyPenalty('base', 'Fixed cost of the cell'),
    KeyPenalty('swipe', 'Swiping instead of tapping, more for awkward directions'),
    KeyPenalty('travel', "Fitts's-Law travel time from the previous key"),
    KeyPenalty('swipe completion', 'Finishing the previous swipe'),
    KeyPenalty('alternating hand', 'Alternating thumbs over three keys'),
    KeyPenalty('same hand skip one', 'Same-thumb travel across one other-thumb key'),
    KeyPenalty('alternating hand 4', 'Alternating thumbs over four keys'),
    KeyPenalty('same hand skip two', 'Same-thumb travel across two other-thumb keys'),
)

TERM_NAMES = tuple(term.name for term in PENALTY_TERMS)
TERM_DESCRIPTIONS = {term.name: term.description for term in PENALTY_TERMS}


@dataclass(frozen=True)
class PenaltyParams:
    """Fixed coefficients of the penalty model for one keyboard variant."""

    base_costs: np.ndarray
    space_cost: float = 0.0
    swipe_cost: float = 0.15
    bad_swipe_cost: float = 0.1
    fitts_min_time: float = 0.1
    fitts_k: float = 4.9
    alternating_hand_3: float = -0.05
    alternating_hand_4: float = -0.05
    skip_one_weight: float = 0.5
    skip_two_weight: float = 0.25

    @classmethod
    def from_config(cls, config: Dict[str, Any], geometry: Geometry) -> 'PenaltyParams':
        """
        Build parameters from the 'penalties' section of a keyboard config.

        Raises:
            ValueError: If base_costs does not match the grid or fitts_k is not positive
        """
        if 'base_costs' not in config:
            raise ValueError(f"Penalties for '{geometry.name}' are missing base_costs")

        base_costs = np.asarray(config['base_costs'], dtype=float)
        if base_costs.shape != (geometry.rows, geometry.cols):
            raise ValueError(
                f"base_costs for '{geometry.name}' has shape {base_costs.shape}, "
                f"expected {(geometry.rows, geometry.cols)}"
            )

        defaults = cls(base_costs=base_costs)
        params = cls(
            base_costs=base_costs,
            **{name: float(config.get(name, getattr(defaults, name)))
               for name in ('space_cost', 'swipe_cost', 'bad_swipe_cost', 'fitts_min_time',
                            'fitts_k', 'alternating_hand_3', 'alternating_hand_4',
                            'skip_one_weight', 'skip_two_weight')}
        )
        if params.fitts_k <= 0:
            raise ValueError("fitts_k must be positive")
        return params


# ----------------------------------------------------------------------
# Diagnostics
# ----------------------------------------------------------------------

@dataclass
class KeyPenaltyResult:
    """Running total of one term plus its cost per window."""

    name: str
    total: float = 0.0
    high_keys: Dict[str, float] = field(default_factory=dict)

    def top_windows(self, n: int = 10) -> List[Tuple[str, float]]:
        """Windows with the largest absolute contribution."""
        return sorted(self.high_keys.items(), key=lambda item: (-abs(item[1]), item[0]))[:n]

    def __str__(self) -> str:
        return f"{self.name}: {self.total}"


class PenaltyObserver:
    """Receives every term contribution made while scoring."""

    def record(self, term: str, window: str, cost: float) -> None:
        raise NotImplementedError


class PenaltyBreakdown(PenaltyObserver):
    """Accumulates contributions into one KeyPenaltyResult per term."""

    def __init__(self, terms: Tuple[KeyPenalty, ...] = PENALTY_TERMS):
        self.results: Dict[str, KeyPenaltyResult] = {
            term.name: KeyPenaltyResult(term.name) for term in terms
        }

    def record(self, term: str, window: str, cost: float) -> None:
        result = self.results[term]
        result.total += cost
        result.high_keys[window] = result.high_keys.get(window, 0.0) + cost

    def as_list(self) -> List[KeyPenaltyResult]:
        return list(self.results.values())

    @property
    def total(self) -> float:
        return sum(result.total for result in self.results.values())


class ObserverGroup(PenaltyObserver):
    """Forwards contributions to several observers."""

    def __init__(self, observers: List[PenaltyObserver]):
        self.observers = observers

    def record(self, term: str, window: str, cost: float) -> None:
        for observer in self.observers:
            observer.record(term, window, cost)


def _charge(observer: Optional[PenaltyObserver], term: str, window: str, cost: float) -> float:
    if observer is not None:
        observer.record(term, window, cost)
    return cost


# ----------------------------------------------------------------------
# Model
# ----------------------------------------------------------------------

class PenaltyModel:
    """Scores quartads against candidate layouts of one geometry."""

    def __init__(self, geometry: Geometry, params: PenaltyParams):
        self.geometry = geometry
        self.params = params

    def fitts(self, distance: float, width: float) -> float:
        """Movement time for a target of ``width`` at ``distance``."""
        p = self.params
        return max(p.fitts_min_time, math.log2(distance / width + 1.0) / p.fitts_k)

    def base_cost(self, position: int) -> float:
        g = self.geometry
        if g.is_space(position):
            return self.params.space_cost
        row, col, _ = g.decompose(position)
        return float(self.params.base_costs[row, col])

    def swipe_penalty(self, position: int) -> float:
        """Flat swipe cost, 0 for taps."""
        if self.geometry.is_tap(position):
            return 0.0
        cost = self.params.swipe_cost
        if not self.geometry.swipe_is_good_for_hand(position):
            cost += self.params.bad_swipe_cost
        return cost

    def travel_time(self, prev: int, curr: int, layout) -> float:
        """Fitts time from where ``prev`` left the thumb to the centre of ``curr``."""
        g = self.geometry
        x0, y0 = g.effective_coordinates(prev, layout)
        x1, y1 = g.coordinates(curr)
        return self.fitts(math.hypot(x1 - x0, y1 - y0), g.target_width(curr, layout))

    def swipe_completion_time(self, position: int, layout) -> float:
        """Extra time to finish a swipe beyond the minimum tap time."""
        g = self.geometry
        return self.fitts(g.swipe_distance, g.swipe_width(position, layout)) - self.params.fitts_min_time

    def penalty_for_quartad(self, window: str, count: int, position_map: PositionMap,
                            layout, observer: Optional[PenaltyObserver] = None) -> float:
        """
        Cost of typing the last character of ``window`` ``count`` times.

        Args:
            window: One to four characters, most recent last
            count: Occurrences of the window in the corpus
            position_map: Position map of ``layout``
            layout: Candidate layout (used for context-sensitive swipes)
            observer: Optional receiver of per-term contributions

        Returns:
            Count-weighted cost of the window
        """
        g = self.geometry
        p = self.params

        chars = window[::-1]
        curr = position_map.lookup(chars[0])
        if curr is None:
            return 0.0

        history = []
        for char in chars[1:]:
            pos = position_map.lookup(char)
            if pos is None:
                break
            history.append(pos)

        count = float(count)
        total = _charge(observer, 'base', window, count * self.base_cost(curr))

        if not g.is_tap(curr):
            total += _charge(observer, 'swipe', window, count * self.swipe_penalty(curr))

        # Two key penalties.
        if not history:
            return total
        old1 = history[0]

        total += _charge(observer, 'travel', window, count * self.travel_time(old1, curr, layout))
        if not g.is_tap(old1):
            total += _charge(observer, 'swipe completion', window,
                             count * self.swipe_completion_time(old1, layout))

        # Three key penalties.
        if len(history) < 2:
            return total
        old2 = history[1]

        # Hand terms only apply when every key involved has a thumb.
        if None in (g.hand(curr), g.hand(old1), g.hand(old2)):
            return total

        alternating = not g.same_hand(old1, curr) and not g.same_hand(old2, old1)
        if alternating:
            total += _charge(observer, 'alternating hand', window, count * p.alternating_hand_3)

        if g.same_hand(old2, curr) and not g.same_hand(old1, curr):
            total += _charge(observer, 'same hand skip one', window,
                             count * p.skip_one_weight * self.travel_time(old2, curr, layout))

        # Four key penalties.
        if len(history) < 3:
            return total
        old3 = history[2]

        if g.hand(old3) is None:
            return total

        if alternating and not g.same_hand(old3, old2):
            total += _charge(observer, 'alternating hand 4', window, count * p.alternating_hand_4)

        if g.same_hand(old3, curr) and not g.same_hand(old2, curr) and not g.same_hand(old1, curr):
            total += _charge(observer, 'same hand skip two', window,
                             count * p.skip_two_weight * self.travel_time(old3, curr, layout))

        return total

    def score_corpus(self, quartads: QuartadTable, layout, detailed: bool = False,
                     observer: Optional[PenaltyObserver] = None
                     ) -> Tuple[float, float, List[KeyPenaltyResult]]:
        """
        Score a whole quartad table against one layout.

        Args:
            quartads: Compiled corpus
            layout: Candidate layout
            detailed: If True, collect a per-term, per-window breakdown
            observer: Optional extra receiver of every contribution

        Returns:
            Tuple of (total, total / corpus length, breakdown); the breakdown
            is empty unless ``detailed`` is set and the average is nan for an
            empty corpus
        """
        breakdown = PenaltyBreakdown() if detailed else None
        if breakdown is not None:
            observer = breakdown if observer is None else ObserverGroup([observer, breakdown])

        position_map = PositionMap.build(layout)

        total = 0.0
        for window, count in quartads.items():
            total += self.penalty_for_quartad(window, count, position_map, layout, observer)

        if quartads.corpus_length == 0:
            logger.warning("Empty corpus: the per-character average is undefined")
            average = math.nan
        else:
            average = total / quartads.corpus_length

        return total, average, breakdown.as_list() if breakdown is not None else []
