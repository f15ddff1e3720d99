#!/usr/bin/env python3
"""
Corpus utilities: loading text and checking how much of it a keyboard can type.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Any, List

from keyswipe.position_map import PositionMap

logger = logging.getLogger(__name__)


def load_corpus(filepath) -> str:
    """
    Read a corpus file as UTF-8 text.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    with open(path, 'r', encoding='utf-8') as f:
        corpus = f.read()

    logger.info("Read corpus %s (%d characters)", path, len(corpus))
    return corpus


def calculate_corpus_coverage(corpus: str, position_map: PositionMap) -> Dict[str, Any]:
    """
    Calculate how much of a corpus is typeable on a keyboard.

    Args:
        corpus: Raw text
        position_map: Position map of any layout of the keyboard

    Returns:
        Dictionary with coverage statistics
    """
    if not corpus:
        return {
            'total_chars': 0,
            'placeable_chars': 0,
            'coverage': 0.0,
            'unsupported_chars': [],
        }

    counts = Counter(corpus)
    unsupported = Counter({char: n for char, n in counts.items() if char not in position_map})
    placeable = len(corpus) - sum(unsupported.values())

    return {
        'total_chars': len(corpus),
        'placeable_chars': placeable,
        'coverage': placeable / len(corpus),
        'unsupported_chars': unsupported.most_common(),
    }


def validate_corpus(corpus: str,
                    position_map: PositionMap,
                    min_length: int = 1,
                    min_coverage: float = 0.5) -> List[str]:
    """
    Validate a corpus for layout scoring.

    Returns:
        List of validation issues (empty if valid)
    """
    issues = []

    if not corpus:
        issues.append("Corpus is empty")
        return issues

    if len(corpus) < min_length:
        issues.append(f"Corpus too short: {len(corpus)} characters (minimum {min_length})")

    coverage = calculate_corpus_coverage(corpus, position_map)
    if coverage['coverage'] < min_coverage:
        issues.append(
            f"Only {coverage['coverage']:.1%} of the corpus is typeable on this keyboard"
        )

    unsupported = coverage['unsupported_chars'][:5]
    if unsupported:
        shown = ', '.join(f"{char!r} x{n}" for char, n in unsupported)
        logger.debug("Most frequent unsupported characters: %s", shown)

    return issues
