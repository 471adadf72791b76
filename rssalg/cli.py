"""
Command line entry point.

Usage:
    rssalg-experiment <properties_folder> <experiment_properties>

Example:
    rssalg-experiment ./data/News2x2/experiment experiment_L.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rssalg.exceptions import format_chain, root_cause
from rssalg.experiments.cross_validation import run_experiment

logger = logging.getLogger(__name__)

USAGE = """\
Usage:
  rssalg-experiment <properties_folder> <experiment_properties>
    <properties_folder>: folder containing data.yaml, cv.yaml, co-training.yaml and GA.yaml
    <experiment_properties>: file in that folder containing the experiment settings

  Example:
    rssalg-experiment ./data/News2x2/experiment experiment_L.yaml
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rssalg-experiment",
        description="Run a cross-validation experiment for co-training based algorithms",
        usage="%(prog)s <properties_folder> <experiment_properties>",
    )
    parser.add_argument(
        "paths", nargs="*", help="Properties folder and experiment settings file"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Hide the progress bar"
    )
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level (default: INFO)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if len(args.paths) != 2:
        if not args.paths:
            print("The graphical interface is not part of this package.")
        print(USAGE)
        return 0

    properties_folder, experiment_file = args.paths
    try:
        outcome = run_experiment(
            properties_folder, experiment_file, show_progress=not args.quiet
        )
    except Exception as err:
        logger.error(format_chain(err), exc_info=logger.isEnabledFor(logging.DEBUG))
        print(root_cause(err))
        return 1

    print()
    print(outcome.results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
