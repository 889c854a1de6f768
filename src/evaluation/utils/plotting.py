import matplotlib

matplotlib.use("Agg")  # figures are only written to files

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from typing import Optional, Tuple

METRIC_LABELS = {
    "transmission_fraction": "Transmission slots / total slots",
    "throughput": "Throughput (packets / slot)",
    "final_slot_index": "Slots to convergence",
}


def plot_sweep(
    summary: pd.DataFrame,
    metric: str = "transmission_fraction",
    title: str = "Efficiency vs initial contention window",
    save_path: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 6),
):
    """
    Plots the mean of a metric against the initial contention window, one line
    per node count (and one line style per packet size), with the confidence
    interval as error bars.

    Args:
        summary: output of SimulationResults.summarize().
        metric: one of the keys of METRIC_LABELS.
        title: The main title for the plot.
        save_path: Path to save the figure. If None the figure is returned open.
        figsize: The (width, height) of the figure.
    """
    mean_col, ci_col = f"{metric}_mean", f"{metric}_ci"

    fig, ax = plt.subplots(figsize=figsize)
    sns.lineplot(
        data=summary,
        x="cw_size",
        y=mean_col,
        hue="node_count",
        style="pkt_size",
        markers=True,
        palette="viridis",
        ax=ax,
    )
    for _, group in summary.groupby(["node_count", "pkt_size"]):
        ax.errorbar(
            group["cw_size"],
            group[mean_col],
            yerr=group[ci_col].fillna(0.0),
            fmt="none",
            ecolor="gray",
            capsize=3,
        )

    ax.set_xscale("log", base=2)
    ax.set_xlabel("Initial contention window")
    ax.set_ylabel(METRIC_LABELS.get(metric, metric))
    ax.set_title(title)
    ax.grid(True, which="both", linestyle=":")

    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
        plt.close(fig)
        return None
    return fig
