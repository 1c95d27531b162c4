import os
import matplotlib.pyplot as plt

from common.models import FlowState
from flow.postproc import head_breakdown

_PARTS = ["elevation_head[m]", "pressure_head[m]", "velocity_head[m]"]


def plot_heads(state: FlowState, out_path: str) -> str:
    """Stacked bar of elevation/pressure/velocity head at inlet and outlet."""
    df = head_breakdown(state).fillna(0.0)
    labels = ["inlet" if s == "1" else "outlet" for s in df["station"]]

    fig = plt.figure()
    bottom = [0.0] * len(df)
    for col in _PARTS:
        vals = list(df[col])
        plt.bar(labels, vals, bottom=bottom, label=col)
        bottom = [b + v for b, v in zip(bottom, vals)]
    plt.ylabel("Head [m]"); plt.legend()

    outdir = os.path.dirname(out_path)
    if outdir:
        os.makedirs(outdir, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path
