#!/usr/bin/env python3
"""
Result container and scorer wrapper for swipe keyboard layouts.

LayoutScorer binds a compiled corpus to a penalty model and turns the raw
(total, average, breakdown) tuple into a ScoreResult for reporting.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple

from keyswipe.layout import Layout
from keyswipe.penalty import KeyPenaltyResult, PenaltyModel, TERM_NAMES
from keyswipe.quartads import QuartadTable


@dataclass
class ScoreResult:
    """
    Standardized result of scoring one layout.

    Lower scores are better.
    """

    primary_score: float
    """Total penalty over the corpus"""

    average_score: float = 0.0
    """Total penalty divided by corpus length"""

    components: Dict[str, float] = field(default_factory=dict)
    """Total of each penalty term (detailed mode only)"""

    scorer_name: str = ""
    layout_string: str = ""

    metadata: Dict[str, Any] = field(default_factory=dict)

    detailed_breakdown: Dict[str, List[Tuple[str, float]]] = field(default_factory=dict)
    """Highest-cost windows per term (detailed mode only)"""

    execution_time: float = 0.0

    def get_score(self, component_name: Optional[str] = None) -> float:
        """
        Get a specific penalty term or the primary score.

        Raises:
            KeyError: If component_name not found in components
        """
        if component_name is None:
            return self.primary_score

        if component_name not in self.components:
            available = list(self.components.keys())
            raise KeyError(f"Component '{component_name}' not found. Available: {available}")

        return self.components[component_name]

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary suitable for CSV export."""
        result = {
            'layout': self.layout_string,
            'primary_score': self.primary_score,
            'average_score': self.average_score,
            'scorer_name': self.scorer_name,
            'execution_time': self.execution_time,
        }

        for component, score in self.components.items():
            result[f'component_{component.replace(" ", "_")}'] = score

        for key, value in self.metadata.items():
            if isinstance(value, (str, int, float, bool)):
                result[f'meta_{key}'] = value

        return result

    def summary(self) -> str:
        summary_lines = [
            f"Scorer: {self.scorer_name}",
            f"Total penalty: {self.primary_score:.6f}",
            f"Average per character: {self.average_score:.6f}",
        ]

        if self.components:
            summary_lines.append("Components:")
            for name, score in self.components.items():
                summary_lines.append(f"  {name}: {score:.6f}")

        if self.execution_time > 0:
            summary_lines.append(f"Execution time: {self.execution_time:.3f}s")

        return "\n".join(summary_lines)


class LayoutScorer:
    """Scores layouts of one keyboard against a fixed corpus."""

    def __init__(self, quartads: QuartadTable, model: PenaltyModel,
                 config: Optional[Dict[str, Any]] = None):
        self.quartads = quartads
        self.model = model
        self.config = config or {}
        self.scorer_name = f"{model.geometry.name}_scorer"
        self.top_windows = self.config.get('output', {}).get('top_windows', 10)

    def score_layout(self, layout: Layout, detailed: bool = False) -> ScoreResult:
        """
        Score one layout.

        Args:
            layout: Candidate layout (must use the model's geometry)
            detailed: If True, fill components and detailed_breakdown

        Returns:
            ScoreResult with timing information
        """
        if layout.geometry != self.model.geometry:
            raise ValueError(
                f"Layout geometry '{layout.geometry.name}' does not match "
                f"scorer geometry '{self.model.geometry.name}'"
            )

        start_time = time.time()
        total, average, breakdown = self.model.score_corpus(self.quartads, layout, detailed)

        result = ScoreResult(
            primary_score=total,
            average_score=average,
            scorer_name=self.scorer_name,
            layout_string=layout.layout_string(),
            metadata={
                'corpus_length': self.quartads.corpus_length,
                'distinct_windows': len(self.quartads),
            },
        )
        if detailed:
            result.components = _components(breakdown)
            result.detailed_breakdown = {
                term.name: term.top_windows(self.top_windows) for term in breakdown
            }

        result.execution_time = time.time() - start_time
        return result


def _components(breakdown: List[KeyPenaltyResult]) -> Dict[str, float]:
    totals = {term.name: term.total for term in breakdown}
    return {name: totals.get(name, 0.0) for name in TERM_NAMES}
