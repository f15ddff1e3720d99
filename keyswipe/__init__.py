# keyswipe/__init__.py
"""
Swipe Keyboard Layout Scoring and Search

Geometry, layouts, quartad compilation, penalty model and neighbor
generation for swipe/tap keyboards.
"""

__version__ = "1.0.0"

# Import main classes for easy access
from .exceptions import LayoutError, MissingCharacterError
from .geometry import Geometry
from .layout import Layout
from .position_map import PositionMap
from .quartads import QuartadTable, prepare_quartad_list
from .penalty import KeyPenaltyResult, PenaltyBreakdown, PenaltyModel, PenaltyObserver, PenaltyParams
from .neighbors import LayoutPermutations
from .scorer import LayoutScorer, ScoreResult
from .config_loader import ConfigLoader, Keyboard, load_keyboard

__all__ = [
    'LayoutError',
    'MissingCharacterError',
    'Geometry',
    'Layout',
    'PositionMap',
    'QuartadTable',
    'prepare_quartad_list',
    'KeyPenaltyResult',
    'PenaltyBreakdown',
    'PenaltyModel',
    'PenaltyObserver',
    'PenaltyParams',
    'LayoutPermutations',
    'LayoutScorer',
    'ScoreResult',
    'ConfigLoader',
    'Keyboard',
    'load_keyboard',
]
