# main.py
import argparse
import logging

import pandas as pd

from common.logging_utils import setup_logging
from common.models import FlowState
from flow.solver import solve
from flow.postproc import state_to_dataframe, head_breakdown, summary
from flow.plots import plot_heads
from io_loader import load_case


def demo_case() -> FlowState:
    """Water jet: inlet pressure from the outlet state."""
    return FlowState.from_options({
        "returnSIUnits": True,
        "sameMedium": True,
        "neglectHeight": True,
        "g": {"value": 9.81, "unit": "m/s^2"},
        "rho1": {"value": 1000, "unit": "kg/m^3"},
        "v1": {"value": 1.96, "unit": "m/s"},
        "h1": {"value": 0, "unit": "m"},
        "p2": {"value": 101000, "unit": "Pa"},
        "v2": {"value": 25.5, "unit": "m/s"},
        "h2": {"value": 0, "unit": "m"},
    })


def main() -> None:
    ap = argparse.ArgumentParser(description="Two-station Bernoulli/continuity solver")
    ap.add_argument("--case", default=None, help="YAML case file; built-in example if omitted")
    ap.add_argument("--log", default="INFO")
    ap.add_argument("--csv", default=None, help="write the result table to this CSV")
    ap.add_argument("--plot", default=None, help="write a head breakdown chart to this image")
    args = ap.parse_args()

    setup_logging(args.log)

    state = load_case(args.case) if args.case else demo_case()
    state = solve(state)

    df = state_to_dataframe(state)
    with pd.option_context("display.float_format", "{:.6g}".format):
        print(df.to_string(index=False))
        print()
        print(head_breakdown(state).to_string(index=False))

    info = summary(state)
    if info["underdetermined"]:
        print(f"Underdetermined, unknown: {', '.join(info['unknown'])}")
    else:
        print("All fields resolved.")

    if args.csv:
        df.to_csv(args.csv, index=False)
        logging.getLogger(__name__).info(f"wrote {args.csv}")
    if args.plot:
        plot_heads(state, args.plot)
        logging.getLogger(__name__).info(f"wrote {args.plot}")


if __name__ == "__main__":
    main()
