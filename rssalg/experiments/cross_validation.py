"""
Cross-validation experiment runner.

For each fold and each split:
- copy the fold data and (optionally) re-split its features into views
- run the configured algorithm on the copy
- pool the result for micro-averaging and record every measure for
  macro-averaging

then merge micro/macro statistics into Results.xml under the experiment's
composite name.

Macro table policy: with ``macro_split_policy="last"`` the value of the
last split of a fold is the one that fills the fold's cell;
``"mean"`` averages the fold's splits instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
from tqdm import tqdm

from rssalg.algorithms import Algorithm, get_algorithm
from rssalg.config import Settings, load_settings
from rssalg.data.dataset import CoTrainingData
from rssalg.data.folds import CrossValidationSeparator, count_folds, fold_dir
from rssalg.evaluation.measures import Measure, get_measures
from rssalg.evaluation.result import ClassificationResult
from rssalg.evaluation.statistics import MeasureSummary, format_value, summarize
from rssalg.exceptions import FoldLoadError, SplitError, SplitterNotSpecifiedError
from rssalg.features.splitters import DatasetSplitter, get_splitter
from rssalg.results.classifiers import ClassifierEnsembleList
from rssalg.results.store import RESULTS_FILE, ExperimentResults

logger = logging.getLogger(__name__)


@dataclass
class ExperimentOutcome:
    """Summary of a finished cross-validation experiment."""

    name: str
    no_folds: int
    no_splits: int
    summaries: List[MeasureSummary]
    results_path: Path
    results: ExperimentResults = field(repr=False, default_factory=ExperimentResults)
    # Pooled result of every fold and split, with per-instance predictions
    # when the algorithm reports instance ids
    pooled: ClassificationResult = field(repr=False, default_factory=ClassificationResult)

    def summary(self, measure: str) -> MeasureSummary:
        for s in self.summaries:
            if s.name == measure:
                return s
        raise KeyError(measure)


class CrossValidationRunner:
    """Runs one algorithm over every fold (and split) in the result folder.

    Args:
        settings: Experiment settings.
        algorithm: Algorithm to run; resolved from settings if None.
        splitter: Feature splitter; resolved from settings if None. Pass
            ``splitter=False`` to force running without one.
        measures: Measures to compute; resolved from settings if None.
        show_progress: Whether to show a progress bar over folds.
    """

    def __init__(
        self,
        settings: Settings,
        algorithm: Optional[Algorithm] = None,
        splitter: Optional[DatasetSplitter] | bool = None,
        measures: Optional[List[Measure]] = None,
        show_progress: bool = True,
    ) -> None:
        self.settings = settings
        self.algorithm = algorithm or get_algorithm(settings.experiment.algorithm, settings)
        if splitter is None:
            splitter = get_splitter(settings.experiment.splitter_name, settings)
        self.splitter: Optional[DatasetSplitter] = splitter or None
        self.measures = measures if measures is not None else get_measures(settings.experiment.measures)
        self.show_progress = show_progress

    @property
    def result_folder(self) -> Path:
        return self.settings.result_folder

    @property
    def results_path(self) -> Path:
        return self.result_folder / RESULTS_FILE

    @property
    def effective_no_splits(self) -> int:
        """Configured split count, forced to 1 for split-insensitive algorithms."""
        if self.algorithm.is_split_insensitive():
            return 1
        return self.settings.experiment.no_splits

    @property
    def experiment_name(self) -> str:
        """Composite name: algorithm[_splitter][_<opt measure>_optimized]."""
        name = self.algorithm.name
        if self.splitter is not None:
            name += f"_{self.splitter.get_name()}"
        if "RSSalg" in self.algorithm.name:
            name += f"_{self.settings.ga.opt_measure}_optimized"
        return name

    def _classifier_file_name(self, prefix: str) -> str:
        name = f"{prefix}_{self.algorithm.name}"
        if self.splitter is not None:
            name += f"_{self.splitter.get_name()}"
        return name + ".xml"

    def check_preconditions(self) -> None:
        """Fail before any fold is processed if the setup cannot run.

        Raises:
            SplitterNotSpecifiedError: If several splits are requested
                without a splitter.
        """
        if self.splitter is None and self.effective_no_splits > 1:
            raise SplitterNotSpecifiedError(
                "Splitter not specified. Cannot run multiple splits experiment."
            )

    def prepare_folds(self) -> Optional[int]:
        """Create fold data unless a preset experiment is loaded.

        Returns:
            Number of folds created, or None when the preset folds are reused.
        """
        if self.settings.dataset.load_preset_experiment:
            return None
        logger.info("Creating folds...")
        n = CrossValidationSeparator(self.settings).prepare_and_save()
        logger.info(f"Folds created: {n}")
        return n

    def load_fold(self, fold: int) -> CoTrainingData:
        """Load one fold from the result folder.

        Raises:
            FoldLoadError: If the fold directory is missing or corrupt.
        """
        path = fold_dir(self.result_folder, fold)
        logger.info(f"Reading {path}")
        return CoTrainingData.load(path, no_views=self.settings.dataset.no_views)

    def apply_splitter(self, data: CoTrainingData, split: int) -> None:
        """Assign views for this split on a working copy of the fold.

        Raises:
            SplitError: If the splitter fails; the splitter is named.
        """
        if self.splitter is None:
            return
        try:
            rng = self.settings.dataset.clone_random()
            self.splitter.split_datasets(None, data, rng, split)
        except Exception as err:
            raise SplitError(f"ERROR: error creating {self.splitter.get_name()} split") from err

    def write_classifiers(
        self,
        fold: int,
        classifiers: ClassifierEnsembleList,
        classifiers_test: ClassifierEnsembleList,
    ) -> None:
        """Write the fold's recorded ensembles; failures are only logged."""
        folder = fold_dir(self.result_folder, fold)
        for prefix, ensembles in [("classifiers", classifiers),
                                  ("classifiers_test", classifiers_test)]:
            if len(ensembles) == 0:
                continue
            path = folder / self._classifier_file_name(prefix)
            try:
                ensembles.to_xml(path)
            except OSError:
                logger.warning(f"Error writing classifier statistics file {path}", exc_info=True)

    def run_fold(
        self,
        fold: int,
        no_splits: int,
        micro_result: ClassificationResult,
        macro_table: np.ndarray,
    ) -> None:
        """Run every split of one fold, updating the accumulators in place."""
        data = self.load_fold(fold)
        record = self.settings.experiment.write_classifiers

        classifiers = ClassifierEnsembleList()
        classifiers_test = ClassifierEnsembleList()
        split_values = np.zeros((len(self.measures), no_splits))

        for split in range(no_splits):
            split_data = data.copy()
            self.apply_splitter(split_data, split)

            result = self.algorithm.run(split_data, fold, split, record)
            micro_result.update(result)

            if record:
                classifiers.add_classifiers(self.algorithm.classifiers)
                classifiers_test.add_classifiers(self.algorithm.classifiers_test_data)

            values = []
            for i, measure in enumerate(self.measures):
                split_values[i, split] = measure.get_measure(result)
                values.append(f"{measure.name}: {format_value(split_values[i, split])}")
            logger.info(f"Fold {fold}, split {split}: " + ", ".join(values))

        if self.settings.experiment.macro_split_policy == "mean":
            macro_table[:, fold] = split_values.mean(axis=1)
        else:
            macro_table[:, fold] = split_values[:, -1]

        if record:
            self.write_classifiers(fold, classifiers, classifiers_test)

    def run(self, no_folds: Optional[int] = None) -> ExperimentOutcome:
        """Run the cross-validation experiment and update Results.xml.

        Args:
            no_folds: Number of folds to run. None discovers them by probing
                fold_0, fold_1, ... in the result folder.

        Raises:
            SplitterNotSpecifiedError: Several splits without a splitter.
            ResultsStoreError: Results.xml cannot be read or written.
            FoldLoadError: No folds, or a fold is missing or corrupt.
            SplitError: The splitter failed.
        """
        self.check_preconditions()
        no_splits = self.effective_no_splits

        results = ExperimentResults.from_xml(self.results_path)

        if no_folds is None:
            no_folds = count_folds(self.result_folder)
        if no_folds == 0:
            raise FoldLoadError(f"No fold directories found in {self.result_folder}")

        logger.info(f"Starting cross-validation for {self.algorithm.name} experiment "
                    f"({no_folds} folds, {no_splits} splits)")

        micro_result = ClassificationResult(keep_predictions=True)
        macro_table = np.zeros((len(self.measures), no_folds))

        folds = range(no_folds)
        if self.show_progress:
            folds = tqdm(folds, desc=f"{self.algorithm.name} folds")

        for fold in folds:
            self.run_fold(fold, no_splits, micro_result, macro_table)

        logger.info("Experiment finished.")

        summaries = [
            summarize(measure, micro_result, macro_table[i])
            for i, measure in enumerate(self.measures)
        ]

        experiment = results.find_experiments_by_properties(
            self.settings.properties()
        ).find_experiment(self.experiment_name)
        for s in summaries:
            logger.info(f"{s.name}: micro averaged {format_value(s.micro_averaged)}, "
                        f"macro averaged {format_value(s.macro_averaged)} +/- {format_value(s.std_dev)}")
            record = experiment.find_measure(s.name)
            record.set_micro_averaged(s.micro_averaged)
            record.set_macro_averaged(s.macro_averaged)
            record.set_std_dev(s.std_dev)

        results.to_xml(self.results_path)

        return ExperimentOutcome(
            name=self.experiment_name,
            no_folds=no_folds,
            no_splits=no_splits,
            summaries=summaries,
            results_path=self.results_path,
            results=results,
            pooled=micro_result,
        )


def run_experiment(
    properties_folder: Path | str,
    experiment_file: str,
    show_progress: bool = True,
) -> ExperimentOutcome:
    """Load settings, prepare folds if needed, and run the experiment."""
    settings = load_settings(properties_folder, experiment_file)
    runner = CrossValidationRunner(settings, show_progress=show_progress)
    runner.check_preconditions()
    no_folds = runner.prepare_folds()
    return runner.run(no_folds)
