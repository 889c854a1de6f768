import os
import json
from datetime import datetime
from typing import Any, Dict, List

from slotsim.engine.common.SimulationContext import SimulationConfig
from slotsim.engine.SimulationEngine import SimulationStats


def setup_working_environment(
    out_dir: str, pkt_size: int, node_count: int, cw_size: int, seed: int
) -> str:
    """Creates the output directory for the run"""

    config_folder_name = f"pkt{pkt_size}_{node_count}N_cw{cw_size}"

    run_output_dir = os.path.join(out_dir, config_folder_name, str(seed))
    os.makedirs(run_output_dir, exist_ok=True)
    return run_output_dir


def save_parameters_log(
    all_args_dict: Dict[str, Any],
    config: SimulationConfig,
    run_output_dir: str,
) -> str:
    """Saves all simulation parameters to a JSON file for reproducibility."""
    params_log_path = os.path.join(run_output_dir, "parameters.json")

    parameters = {
        "run_start_time": datetime.now().isoformat(),
        "command_line_arguments": all_args_dict,
        "simulation_config": {
            "pkt_size": config.pkt_size,
            "node_count": config.node_count,
            "cw_size": config.cw_size,
            "horizon": config.horizon,
            "sampling_interval": config.sampling_interval,
            "threshold": config.threshold,
        },
    }
    with open(params_log_path, "w") as f:
        json.dump(parameters, f, indent=4, default=str)
    return params_log_path


def format_report(stats: SimulationStats, cw_size: int) -> List[str]:
    """
    Report lines of a converged run. The last line (window size and fraction of
    transmission slots) is meant to be collected across runs for plotting.
    """
    return [
        f"Idle Slots: {stats.idle_count}",
        f"Transmission Slots: {stats.transmission_count}",
        f"Collision Slots: {stats.collision_count}",
        f"Packets successfully transmitted: {stats.completed_packets}",
        f"Total slots used for simulation: {stats.final_slot_index}",
        f"Throughput: {stats.throughput:f}",
        f" {cw_size} {stats.transmission_fraction:f}",
    ]
