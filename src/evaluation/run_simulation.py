import sys
import os
import argparse
from typing import List, Optional, Tuple

from slotsim.engine.SimulationEngine import SimulationEngine
from slotsim.engine.common.SimulationContext import SimulationConfig, SimulationContext
from slotsim.engine.common.trace_monitor import EfficiencyTraceMonitor
from slotsim.engine.errors import InvalidParameter, NonConvergenceError
from slotsim.engine.random import RandomManager
from evaluation.utils.setup_args import setup_arguments
from evaluation.utils.helpers import (
    format_report,
    save_parameters_log,
    setup_working_environment,
)
from evaluation.utils.simulation_logger import SimulationLogger
from evaluation.utils.simulation_result import SimulationResult

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        pkt_size=args.pkt_size,
        node_count=args.node_count,
        cw_size=args.cw_size,
        horizon=args.horizon,
    )


def bootstrap_engine(
    args: argparse.Namespace, verbose: bool = False
) -> Tuple[SimulationEngine, EfficiencyTraceMonitor]:
    """Validates the parameters and builds the engine with its trace monitor."""
    config = config_from_args(args)
    random_manager = RandomManager(
        root_seed=args.seed, worker_id=args.worker_id, antithetic=args.antithetic
    )
    engine = SimulationEngine(SimulationContext(config, random_manager))
    trace_monitor = EfficiencyTraceMonitor(verbose=verbose)
    engine.attach_monitor(trace_monitor)
    return engine, trace_monitor


def run(args: argparse.Namespace, logger: SimulationLogger) -> Tuple[int, Optional[SimulationResult]]:
    """Runs one simulation and logs its report. Returns the exit code and the result."""
    try:
        engine, trace_monitor = bootstrap_engine(args, verbose=logger.is_enabled("DEBUG"))
    except InvalidParameter as e:
        logger.error(f"Error taking inputs! {e}")
        return EXIT_FAILURE, None

    logger.debug(
        f"--- Starting Run (pkt_size={args.pkt_size}, node_count={args.node_count}, "
        f"cw_size={args.cw_size}, seed={args.seed}) ---"
    )

    exit_code = EXIT_SUCCESS
    try:
        stats = engine.run()
    except NonConvergenceError as e:
        logger.error("Simulation failed to converge. Exiting...")
        stats = e.stats
        exit_code = EXIT_FAILURE
    else:
        for line in format_report(stats, args.cw_size):
            logger.log(line)

    parameters = {
        "pkt_size": args.pkt_size,
        "node_count": args.node_count,
        "cw_size": args.cw_size,
        "seed": args.seed,
    }
    result = SimulationResult(
        stats=stats,
        parameters=parameters,
        trace_monitor=trace_monitor if args.save_trace else None,
    )
    return exit_code, result


def main(argv: Optional[List[str]] = None) -> int:
    args = setup_arguments(argv)

    run_output_dir = None
    log_path = None
    if args.out_dir is not None:
        run_output_dir = setup_working_environment(
            args.out_dir, args.pkt_size, args.node_count, args.cw_size, args.seed
        )
        log_path = os.path.join(run_output_dir, "simulation.log")

    with SimulationLogger(log_path) as logger:
        exit_code, result = run(args, logger)

        if run_output_dir is not None and result is not None:
            save_parameters_log(vars(args), config_from_args(args), run_output_dir)
            result.save(run_output_dir)
            logger.debug(f"Data saved to {run_output_dir}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
