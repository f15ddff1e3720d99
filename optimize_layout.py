#!/usr/bin/env python3
"""
Swipe keyboard layout optimizer.

Scores a keyboard layout against a text corpus and refines it by exhaustive
swap neighborhoods. Keyboard geometries, penalty weights and layouts are read
from config.yaml.

Usage:

  # Score the reference layout with a per-term breakdown
  python optimize_layout.py run-ref corpus.txt

  # Refine by single swaps, keep the 3 best layouts and save them
  python optimize_layout.py refine corpus.txt --top 3 --csv refined.csv

  # Refine by pairs of same-class swaps, at most 2 rounds
  python optimize_layout.py refine corpus.txt --swaps 2 --rounds 2

  # Refine from a randomly shuffled start
  python optimize_layout.py refine corpus.txt --shuffle 100 --seed 1

  # List the 20 most frequent corpus windows after scoring
  python optimize_layout.py run-ref corpus.txt --quartads 20

  # Draw a layout
  python optimize_layout.py show --keyboard messagease_3x3

  # Print a layout as config.yaml cells
  python optimize_layout.py show --cells
"""

import logging
import random
import sys

import yaml

from keyswipe.cli_utils import handle_common_errors, parse_args, setup_logging
from keyswipe.config_loader import get_config_loader, load_keyboard
from keyswipe.output_utils import print_results, save_results_csv
from keyswipe.quartads import QUARTAD_LENGTH, prepare_quartad_list
from keyswipe.refine import refine_layout
from keyswipe.scorer import LayoutScorer
from keyswipe.text_utils import load_corpus, validate_corpus

logger = logging.getLogger(__name__)


def _prepare(args, reference):
    corpus = load_corpus(args.corpus)
    position_map = reference.position_map()

    for issue in validate_corpus(corpus, position_map, min_length=QUARTAD_LENGTH):
        logger.warning("Corpus: %s", issue)
    if not corpus:
        raise ValueError("Empty corpus: nothing to score")

    quartads = prepare_quartad_list(corpus, position_map)
    logger.info("Compiled %d distinct quartads", len(quartads))
    logger.debug("Most common windows: %s", quartads.most_common(5))
    return quartads


def run_ref(args, keyboard, output_config) -> int:
    reference = keyboard.reference_layout(args.layout)
    quartads = _prepare(args, reference)

    scorer = LayoutScorer(quartads, keyboard.model(), keyboard.config)
    result = scorer.score_layout(reference, detailed=True)

    print(f"Reference: {args.layout or keyboard.reference_name}")
    print_results(result, args.output_format, output_config, layout=reference)

    if args.quartads > 0:
        print(f"\nMost frequent windows ({quartads.total_windows} in total):")
        print(quartads.to_dataframe().head(args.quartads).to_string(index=False))
    return 0


def refine(args, keyboard, output_config) -> int:
    start = keyboard.reference_layout(args.layout)
    quartads = _prepare(args, start)
    model = keyboard.model()

    if args.shuffle > 0:
        start = start.copy()
        start.shuffle(args.shuffle, random.Random(args.seed))
        logger.info("Shuffled start layout with %d random swaps", args.shuffle)

    kept = refine_layout(quartads, start, model,
                         top=args.top, num_swaps=args.swaps, max_rounds=args.rounds)

    scorer = LayoutScorer(quartads, model, keyboard.config)
    results = []
    for rank, (_, layout) in enumerate(kept, 1):
        result = scorer.score_layout(layout, detailed=True)
        results.append((f"rank_{rank}", result))
        print(f"\n#{rank}")
        print_results(result, args.output_format, output_config, layout=layout)

    if args.csv_file:
        save_results_csv(results, args.csv_file)
        logger.info("Saved %d layouts to %s", len(results), args.csv_file)

    return 0


def show(args, keyboard, output_config) -> int:
    layout = keyboard.reference_layout(args.layout)
    name = args.layout or keyboard.reference_name

    if args.cells:
        cells = {name: layout.to_cells(keyboard.empty_marker)}
        print(yaml.safe_dump(cells, allow_unicode=True, default_flow_style=None), end='')
        return 0

    print(f"{keyboard.name}: {name}")
    print(layout.render())
    return 0


COMMANDS = {
    'run-ref': run_ref,
    'refine': refine,
    'show': show,
}


@handle_common_errors
def main() -> int:
    args = parse_args()

    loader = get_config_loader(args.config)
    common_config = loader.get_common_config()
    setup_logging(common_config, verbose=args.verbose, quiet=args.quiet)

    keyboard = load_keyboard(args.keyboard, args.config)
    output_config = common_config.get('output', {})

    return COMMANDS[args.command](args, keyboard, output_config)


if __name__ == "__main__":
    sys.exit(main())
