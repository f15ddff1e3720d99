#!/usr/bin/env python3
"""
Output utilities for swipe layout scoring.

Formats ScoreResults as detailed text, CSV or bare scores, and collects
several results into a pandas DataFrame for export.
"""

import sys
from typing import Dict, Any, List, Optional, Tuple

import pandas as pd

from keyswipe.layout import Layout
from keyswipe.penalty import TERM_DESCRIPTIONS
from keyswipe.scorer import ScoreResult


def format_csv_output(result: ScoreResult,
                      config: Optional[Dict[str, Any]] = None) -> str:
    """
    Format one result as a CSV header and data row.

    Args:
        result: ScoreResult object to format
        config: Output format configuration (delimiter, precision, include_headers)
    """
    if config is None:
        config = {}

    delimiter = config.get('delimiter', ',')
    precision = config.get('precision', 6)
    include_headers = config.get('include_headers', True)

    row = result.to_dict()
    lines = []

    if include_headers:
        lines.append(delimiter.join(row.keys()))

    values = []
    for value in row.values():
        if isinstance(value, float):
            values.append(f"{value:.{precision}f}")
        else:
            values.append(str(value))
    lines.append(delimiter.join(values))

    return '\n'.join(lines)


def format_score_only_output(result: ScoreResult,
                             config: Optional[Dict[str, Any]] = None,
                             include_components: bool = False) -> str:
    """Format a result as space-separated scores."""
    if config is None:
        config = {}

    precision = config.get('precision', 6)
    separator = config.get('separator', ' ')

    scores = [f"{result.primary_score:.{precision}f}", f"{result.average_score:.{precision}f}"]

    if include_components:
        for score in result.components.values():
            scores.append(f"{score:.{precision}f}")

    return separator.join(scores)


def format_detailed_output(result: ScoreResult,
                           config: Optional[Dict[str, Any]] = None,
                           layout: Optional[Layout] = None) -> str:
    """
    Format a result as human-readable text.

    Args:
        result: ScoreResult object to format
        config: Output format configuration (precision, show_breakdown)
        layout: If given, the layout grid is drawn above the scores
    """
    if config is None:
        config = {}

    precision = config.get('precision', 6)
    show_breakdown = config.get('show_breakdown', False)

    lines = []

    if layout is not None:
        lines.append(layout.render())
        lines.append("")

    lines.append(f"{'Total penalty':<28}: {result.primary_score:.{precision}f}")
    lines.append(f"{'Average per character':<28}: {result.average_score:.{precision}f}")

    if result.components:
        lines.append("")
        lines.append("Penalty terms:")
        for component, score in result.components.items():
            lines.append(f"  {component.capitalize():<26}: {score:.{precision}f}")

    if show_breakdown and result.detailed_breakdown:
        lines.append("")
        lines.append("Highest-cost windows:")
        for term, windows in result.detailed_breakdown.items():
            if not windows:
                continue
            description = TERM_DESCRIPTIONS.get(term)
            lines.append(f"  {term} ({description}):" if description else f"  {term}:")
            for window, cost in windows:
                lines.append(f"    {window!r:<10} {cost:.{precision}f}")

    if result.metadata:
        lines.append("")
        lines.append("Additional information:")
        for key, value in sorted(result.metadata.items()):
            if isinstance(value, (str, int, float, bool)):
                key_name = key.replace('_', ' ').capitalize()
                lines.append(f"  {key_name:<26}: {value}")

    if result.execution_time > 0:
        lines.append(f"  {'Execution time':<26}: {result.execution_time:.3f}s")

    return '\n'.join(lines)


def print_results(result: ScoreResult,
                  output_format: str = "detailed",
                  config: Optional[Dict[str, Any]] = None,
                  layout: Optional[Layout] = None,
                  file=None) -> None:
    """
    Print a result in the specified format.

    Raises:
        ValueError: If output_format is unknown
    """
    if file is None:
        file = sys.stdout

    if output_format == "csv":
        output = format_csv_output(result, config)
    elif output_format == "score_only":
        output = format_score_only_output(result, config)
    elif output_format == "summary":
        output = result.summary()
    elif output_format == "detailed":
        output = format_detailed_output(result, config, layout)
    else:
        raise ValueError(f"Unknown output format: {output_format}")

    print(output, file=file)


def results_to_dataframe(results: List[Tuple[str, ScoreResult]]) -> pd.DataFrame:
    """
    Collect named results into one table sorted by total penalty.

    Args:
        results: (name, ScoreResult) pairs
    """
    rows = []
    for name, result in results:
        row = {'name': name}
        row.update(result.to_dict())
        rows.append(row)

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values('primary_score', ignore_index=True)


def save_results_csv(results: List[Tuple[str, ScoreResult]], filepath) -> pd.DataFrame:
    """Write named results to a CSV file and return the table."""
    df = results_to_dataframe(results)
    df.to_csv(filepath, index=False)
    return df
