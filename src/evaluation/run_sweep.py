import sys
import os
import argparse
import itertools
from pathlib import Path
from typing import List, Optional

import pandas as pd
from tqdm import tqdm

from slotsim.engine.SimulationEngine import SimulationEngine
from slotsim.engine.common.SimulationContext import SimulationConfig, SimulationContext
from slotsim.engine.errors import InvalidParameter, NonConvergenceError
from slotsim.engine.random import RandomManager
from evaluation.metrics.results import SimulationResults
from evaluation.utils.helpers import setup_working_environment
from evaluation.utils.plotting import plot_sweep
from evaluation.utils.setup_args import setup_sweep_arguments
from evaluation.utils.simulation_logger import SimulationLogger
from evaluation.utils.simulation_result import SimulationResult


def run_replication(
    config: SimulationConfig, seed: int, worker_id: int, antithetic: bool
) -> SimulationResult:
    """Runs one replication; a non-converged run is kept with its partial stats."""
    random_manager = RandomManager(root_seed=seed, worker_id=worker_id, antithetic=antithetic)
    engine = SimulationEngine(SimulationContext(config, random_manager))
    try:
        stats = engine.run()
    except NonConvergenceError as e:
        stats = e.stats

    parameters = {
        "pkt_size": config.pkt_size,
        "node_count": config.node_count,
        "cw_size": config.cw_size,
        "seed": seed,
    }
    return SimulationResult(stats=stats, parameters=parameters)


def run_sweep(args: argparse.Namespace, logger: SimulationLogger) -> pd.DataFrame:
    """
    Runs every configuration of the grid args.repetitions times, saving each
    replication below args.out_dir, and returns the summary table.
    """
    grid = list(itertools.product(args.pkt_sizes, args.node_counts, args.cw_sizes))
    logger.log(f"--- Sweep of {len(grid)} configurations x {args.repetitions} repetitions ---")

    for worker_id, (pkt_size, node_count, cw_size) in enumerate(
        tqdm(grid, desc="Sweep", unit="config")
    ):
        try:
            config = SimulationConfig(
                pkt_size=pkt_size,
                node_count=node_count,
                cw_size=cw_size,
                horizon=args.horizon,
            ).validate()
        except InvalidParameter as e:
            logger.error(f"Skipping pkt_size={pkt_size} node_count={node_count} cw_size={cw_size}: {e}")
            continue

        for rep in range(args.repetitions):
            seed = args.seed + rep
            result = run_replication(config, seed, worker_id, args.antithetic)
            run_output_dir = setup_working_environment(
                args.out_dir, pkt_size, node_count, cw_size, seed
            )
            result.save(run_output_dir)

            status = "converged" if result.converged else "NOT converged"
            logger.debug(
                f"[pkt={pkt_size} N={node_count} cw={cw_size} seed={seed}] {status} at slot "
                f"{result.stats.final_slot_index}, efficiency={result.stats.transmission_fraction:.4f}"
            )

    summary = SimulationResults.from_folder(Path(args.out_dir)).summarize(args.confidence)
    if summary.empty:
        logger.error("No replication was run.")
        return summary

    summary_path = os.path.join(args.out_dir, "summary.csv")
    summary.to_csv(summary_path, index=False)
    logger.log(f"Summary saved to {summary_path}")

    non_converged = int(summary["non_converged"].sum())
    if non_converged:
        logger.log(f"WARNING: {non_converged} replications did not converge")

    if not args.no_plot:
        plot_path = os.path.join(args.out_dir, "transmission_fraction.png")
        plot_sweep(summary, metric="transmission_fraction", save_path=plot_path)
        logger.log(f"Plot saved to {plot_path}")

    return summary


def main(argv: Optional[List[str]] = None) -> int:
    args = setup_sweep_arguments(argv)
    os.makedirs(args.out_dir, exist_ok=True)

    with SimulationLogger(os.path.join(args.out_dir, "sweep.log")) as logger:
        summary = run_sweep(args, logger)

    return 0 if not summary.empty else 1


if __name__ == "__main__":
    sys.exit(main())
