"""
Tests for the command line entry point.
"""
import pytest
import yaml

from rssalg.cli import main
from rssalg.data.folds import count_folds
from rssalg.experiments import run_experiment
from rssalg.results.store import ExperimentResults


def _write(folder, name, content):
    with open(folder / name, "w") as f:
        yaml.safe_dump(content, f)


@pytest.fixture
def properties_folder(temp_dir, dataset_csv):
    folder = temp_dir / "experiment"
    folder.mkdir()
    _write(folder, "data.yaml", {
        "dataset_file": str(dataset_csv),
        "result_folder": str(temp_dir / "results"),
        "labeled_size": 0.25,
    })
    _write(folder, "cv.yaml", {"no_folds": 3})
    _write(folder, "co-training.yaml", {"classifier": "naive_bayes"})
    _write(folder, "GA.yaml", {"opt_measure": "accuracy"})
    _write(folder, "experiment_L.yaml", {"algorithm": "L", "measures": ["accuracy", "macro_f1"]})
    _write(folder, "experiment_bad.yaml", {"algorithm": "L", "no_splits": 3})
    return folder


class TestArguments:

    def test_no_arguments_prints_usage(self, capsys):
        assert main([]) == 0

        out = capsys.readouterr().out
        assert "graphical interface" in out
        assert "Usage" in out

    def test_wrong_argument_count_prints_usage(self, capsys):
        assert main(["only_one"]) == 0

        out = capsys.readouterr().out
        assert "Usage" in out
        assert "graphical interface" not in out


class TestRun:

    def test_runs_experiment(self, properties_folder, temp_dir, capsys):
        code = main([str(properties_folder), "experiment_L.yaml", "--quiet"])

        assert code == 0
        results_path = temp_dir / "results" / "Results.xml"
        assert results_path.exists()
        experiment = ExperimentResults.from_xml(results_path).groups[0].experiments[0]
        assert experiment.name == "L"
        assert [m.name for m in experiment.measures] == ["accuracy", "macro_f1"]
        assert count_folds(temp_dir / "results") == 3
        assert "accuracy: micro" in capsys.readouterr().out

    def test_missing_properties_file(self, properties_folder, capsys):
        (properties_folder / "cv.yaml").unlink()

        code = main([str(properties_folder), "experiment_L.yaml", "--quiet"])

        assert code == 1
        assert "cv.yaml" in capsys.readouterr().out

    def test_splitter_check_precedes_fold_creation(self, properties_folder, temp_dir, capsys):
        code = main([str(properties_folder), "experiment_bad.yaml", "--quiet"])

        assert code == 1
        assert "Splitter not specified" in capsys.readouterr().out
        assert count_folds(temp_dir / "results") == 0

    def test_rerun_with_fewer_folds(self, properties_folder, temp_dir):
        _write(properties_folder, "cv.yaml", {"no_folds": 5})
        assert main([str(properties_folder), "experiment_L.yaml", "--quiet"]) == 0
        _write(properties_folder, "cv.yaml", {"no_folds": 3})

        outcome = run_experiment(properties_folder, "experiment_L.yaml", show_progress=False)

        assert outcome.no_folds == 3
        assert count_folds(temp_dir / "results") == 3
        assert outcome.pooled.total == 60
