import argparse
from typing import List, Optional

from slotsim.engine.config import MAX_SLOTS


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--horizon",
        type=int,
        default=MAX_SLOTS,
        help="Maximum number of simulated slots",
    )
    parser.add_argument(
        "--antithetic",
        action="store_true",
        help="Run the simulation using antithetic variates",
    )
    parser.add_argument(
        "--out_dir",
        type=str,
        default=None,
        help="Output directory for logs and CSV files (nothing is saved if omitted)",
    )


def setup_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Configures and parses command-line arguments of a single run."""
    parser = argparse.ArgumentParser(
        description="Run a single slotted CSMA/CA backoff simulation."
    )

    parser.add_argument("pkt_size", type=int, help="Packet size in slots")
    parser.add_argument("node_count", type=int, help="Number of contending nodes")
    parser.add_argument("cw_size", type=int, help="Initial contention window size")

    parser.add_argument(
        "--seed",
        type=int,
        default=123,
        help="Root seed of the backoff random stream",
    )
    parser.add_argument(
        "--worker_id",
        type=int,
        default=0,
        help="Worker id mixed into the seed (for parallel runs)",
    )
    parser.add_argument(
        "--save_trace",
        action="store_true",
        help="Save the efficiency samples of the run as CSV (requires --out_dir)",
    )
    _add_common_arguments(parser)
    return parser.parse_args(argv)


def setup_sweep_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Configures and parses command-line arguments of a parameter sweep."""
    parser = argparse.ArgumentParser(
        description="Sweep packet size, node count and initial contention window."
    )

    parser.add_argument(
        "--pkt_sizes", type=int, nargs="+", default=[10], help="Packet sizes in slots"
    )
    parser.add_argument(
        "--node_counts", type=int, nargs="+", default=[10, 50, 100], help="Node counts"
    )
    parser.add_argument(
        "--cw_sizes",
        type=int,
        nargs="+",
        default=[2, 4, 8, 16, 32, 64, 128, 256, 512],
        help="Initial contention window sizes",
    )
    parser.add_argument(
        "--repetitions", type=int, default=5, help="Replications per configuration"
    )
    parser.add_argument(
        "--seed", type=int, default=123, help="Root seed of the first replication"
    )
    parser.add_argument(
        "--confidence", type=float, default=0.95, help="Confidence level of the intervals"
    )
    parser.add_argument(
        "--no_plot", action="store_true", help="Do not produce the summary plot"
    )
    _add_common_arguments(parser)
    args = parser.parse_args(argv)
    if args.out_dir is None:
        args.out_dir = "results/sweep"
    return args
