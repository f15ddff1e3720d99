#!/usr/bin/env python3
"""
CLI utilities for the layout optimizer.

Argument parsing, logging setup and common error handling for
optimize_layout.py.
"""

import argparse
import functools
import logging
import sys
import traceback
from typing import Dict, Any, List, Optional

import yaml

from keyswipe.config_loader import DEFAULT_CONFIG_PATH


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per action."""
    parser = argparse.ArgumentParser(
        description="Score swipe keyboard layouts against a corpus and refine them by local search.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_generate_epilog(),
    )

    common = argparse.ArgumentParser(add_help=False)
    keyboard_group = common.add_argument_group('Keyboard')
    keyboard_group.add_argument('--keyboard', default='swipe_3x6',
                                help="Keyboard variant from the configuration (default: swipe_3x6)")
    keyboard_group.add_argument('--layout', default=None,
                                help="Named layout of the keyboard (default: its reference layout)")
    keyboard_group.add_argument('--config', default=str(DEFAULT_CONFIG_PATH),
                                help="Path to configuration file (default: config.yaml)")

    output_group = common.add_argument_group('Output Options')
    output_group.add_argument('--output-format', dest='output_format',
                              choices=['detailed', 'summary', 'csv', 'score_only'], default='detailed',
                              help="Output format (default: detailed)")
    output_group.add_argument('--verbose', action='store_true', help="Show debug logging")
    output_group.add_argument('--quiet', action='store_true', help="Only log warnings and errors")

    subparsers = parser.add_subparsers(dest='command', required=True)

    run_ref = subparsers.add_parser('run-ref', parents=[common],
                                    help="Score the reference layout with a per-term breakdown")
    run_ref.add_argument('corpus', help="Path to corpus text file")
    run_ref.add_argument('--quartads', type=int, default=0, metavar='N',
                         help="Also list the N most frequent corpus windows")

    refine = subparsers.add_parser('refine', parents=[common],
                                   help="Refine the reference layout by swapping characters")
    refine.add_argument('corpus', help="Path to corpus text file")
    refine.add_argument('-t', '--top', type=int, default=1,
                        help="Number of top layouts to keep and print (default: 1)")
    refine.add_argument('-s', '--swaps', type=int, choices=[1, 2], default=1,
                        help="Swaps per neighbor layout (default: 1)")
    refine.add_argument('--rounds', type=int, default=None,
                        help="Maximum number of refinement rounds (default: until no improvement)")
    refine.add_argument('--shuffle', type=int, default=0, metavar='N',
                        help="Start from the reference layout after N random swaps")
    refine.add_argument('--seed', type=int, default=None,
                        help="Random seed for --shuffle")
    refine.add_argument('--csv', dest='csv_file', default=None,
                        help="Save the retained layouts and their scores to a CSV file")

    show = subparsers.add_parser('show', parents=[common], help="Draw a layout")
    show.add_argument('--cells', action='store_true',
                      help="Print the layout as YAML cells for config.yaml instead of a drawing")

    return parser


def _generate_epilog() -> str:
    lines = [
        "Examples:",
        "  # Score the reference layout",
        "  python optimize_layout.py run-ref corpus.txt",
        "",
        "  # Keep the 3 best layouts found by single swaps",
        "  python optimize_layout.py refine corpus.txt --top 3 --csv refined.csv",
        "",
        "  # Draw another keyboard variant",
        "  python optimize_layout.py show --keyboard messagease_3x3",
    ]
    return "\n".join(lines)


def setup_logging(common_config: Dict[str, Any], verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root logger from the 'common.logging' section."""
    logging_config = common_config.get('logging', {})
    level_name = logging_config.get('level', 'INFO')
    log_format = logging_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, str(level_name).upper(), logging.INFO)

    logging.basicConfig(level=level, format=log_format, force=True)


def handle_common_errors(func):
    """
    Decorator that turns CLI failures into exit codes.

    Bad input (missing files, unknown keyboards, invalid layouts or YAML)
    prints a one-line error. Anything else prints "Unexpected error" with
    the traceback. Both return 1; Ctrl-C returns 130.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user.", file=sys.stderr)
            return 130
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
        except PermissionError as e:
            print(f"Permission error: {e}", file=sys.stderr)
        except yaml.YAMLError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            traceback.print_exc()
        return 1

    return wrapper


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(args)
