import math

import pandas as pd
import pytest
import scipy.stats as stats

from evaluation.metrics.results import SimulationResults, confidence_interval
from evaluation.run_sweep import main, run_replication, run_sweep
from evaluation.utils.setup_args import setup_sweep_arguments
from evaluation.utils.simulation_logger import SimulationLogger
from slotsim.engine.common.SimulationContext import SimulationConfig


def sweep_args(tmp_path, *extra):
    return setup_sweep_arguments(
        [
            "--pkt_sizes", "1",
            "--node_counts", "0", "1",
            "--cw_sizes", "1",
            "--repetitions", "2",
            "--horizon", "20000",
            "--out_dir", str(tmp_path),
            *extra,
        ]
    )


def test_sweep_summary(tmp_path):
    args = sweep_args(tmp_path)
    with SimulationLogger() as logger:
        summary = run_sweep(args, logger)

    assert summary[["node_count", "repetitions", "non_converged"]].values.tolist() == [
        [0, 2, 0],
        [1, 2, 0],
    ]
    idle_row = summary.iloc[0]
    assert idle_row["final_slot_index_mean"] == 2000
    assert idle_row["throughput_mean"] == 0.0
    assert idle_row["throughput_ci"] == 0.0
    assert summary.iloc[1]["transmission_fraction_mean"] == pytest.approx(1.0, abs=1e-3)

    assert (tmp_path / "summary.csv").exists()
    assert (tmp_path / "transmission_fraction.png").exists()
    assert len(list(tmp_path.rglob("stats.json"))) == 4


def test_invalid_configurations_are_skipped(tmp_path, capsys):
    args = sweep_args(tmp_path, "--no_plot")
    args.node_counts = [0, 2000]
    with SimulationLogger() as logger:
        summary = run_sweep(args, logger)

    assert summary["node_count"].tolist() == [0]
    assert "Skipping pkt_size=1 node_count=2000" in capsys.readouterr().err
    assert not (tmp_path / "transmission_fraction.png").exists()


def test_non_converged_replications_are_counted(tmp_path):
    config = SimulationConfig(pkt_size=1, node_count=0, cw_size=1, horizon=1500)
    result = run_replication(config, seed=1, worker_id=0, antithetic=False)
    assert not result.converged
    result.save(str(tmp_path / "rep"))

    summary = SimulationResults.from_folder(tmp_path).summarize()
    assert summary.loc[0, "non_converged"] == 1
    assert math.isnan(summary.loc[0, "throughput_mean"])


def test_main_writes_summary(tmp_path):
    assert main(["--node_counts", "0", "--cw_sizes", "1", "4", "--repetitions", "1",
                 "--pkt_sizes", "2", "--out_dir", str(tmp_path)]) == 0
    summary = pd.read_csv(tmp_path / "summary.csv")
    assert summary["cw_size"].tolist() == [1, 4]
    assert (tmp_path / "sweep.log").exists()


def test_confidence_interval():
    samples = pd.Series([1.0, 2.0, 3.0, 4.0])
    expected = stats.t.ppf(0.975, df=3) * samples.std(ddof=1) / 2.0
    assert confidence_interval(samples) == pytest.approx(expected)
    assert math.isnan(confidence_interval(pd.Series([1.0])))


def test_empty_results_folder(tmp_path):
    assert SimulationResults.from_folder(tmp_path).summarize().empty
