#!/usr/bin/env python3
"""
Compile a corpus into quartad counts.

A quartad is a window of up to four consecutive characters that are all on
the keyboard. Every placeable corpus character contributes exactly one
window ending at that character; characters that are not on the keyboard
break the window, so no window spans a typing gap.
"""

import logging
from collections import Counter
from collections.abc import Mapping
from typing import Dict, Iterator, List, Tuple

import pandas as pd

from keyswipe.position_map import PositionMap

logger = logging.getLogger(__name__)

QUARTAD_LENGTH = 4


class QuartadTable(Mapping):
    """
    Window -> occurrence count, plus the length of the corpus it came from.

    Keys are raw substrings rather than positions, so one table serves every
    candidate layout. Scoring only reads it.
    """

    def __init__(self, counts: Dict[str, int], corpus_length: int):
        self._counts = dict(counts)
        self.corpus_length = corpus_length

    def __getitem__(self, window: str) -> int:
        return self._counts[window]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"QuartadTable({len(self)} windows, corpus_length={self.corpus_length})"

    @property
    def total_windows(self) -> int:
        """Number of placeable characters in the corpus."""
        return sum(self._counts.values())

    def most_common(self, n: int = 10) -> List[Tuple[str, int]]:
        return Counter(self._counts).most_common(n)

    def to_dataframe(self) -> pd.DataFrame:
        """Table of windows sorted by descending count."""
        df = pd.DataFrame(
            [(window, len(window), count) for window, count in self._counts.items()],
            columns=['window', 'length', 'count'],
        )
        return df.sort_values(['count', 'window'], ascending=[False, True], ignore_index=True)


def prepare_quartad_list(corpus: str,
                         position_map: PositionMap,
                         window_size: int = QUARTAD_LENGTH) -> QuartadTable:
    """
    Count every window of up to ``window_size`` placeable characters.

    Args:
        corpus: Raw text
        position_map: Decides which characters are placeable
        window_size: Maximum window length

    Returns:
        QuartadTable for the corpus
    """
    if window_size < 1:
        raise ValueError(f"window_size must be positive, got {window_size}")

    counts: Dict[str, int] = {}
    start = end = 0

    for i, char in enumerate(corpus):
        if position_map.lookup(char) is not None:
            end = i + 1
            if end - start > window_size:
                start = end - window_size
            window = corpus[start:end]
            counts[window] = counts.get(window, 0) + 1
        else:
            start = end = i + 1

    logger.debug("Compiled %d distinct windows from %d characters", len(counts), len(corpus))
    return QuartadTable(counts, len(corpus))
