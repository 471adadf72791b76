#!/usr/bin/env python
"""
Run a cross-validation experiment from a properties folder.

Usage:
    python scripts/run_experiment.py <properties_folder> <experiment_properties>
    python scripts/run_experiment.py ./data/News2x2/experiment experiment_L.yaml
    python scripts/run_experiment.py ./data/News2x2/experiment experiment_Random.yaml --quiet

Results are merged into <result_folder>/Results.xml.
"""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from rssalg.cli import main


if __name__ == "__main__":
    sys.exit(main())
