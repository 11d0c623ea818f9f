"""
Plot the running stock balance of a single product.

Usage:
  python scripts/plot_balance.py P001
  python scripts/plot_balance.py P001 --out data/plots/P001-balance.png
"""
import argparse
import os
import sys

import matplotlib.pyplot as plt
import pandas as pd

from stockledger.balance import running_balance_frame
from stockledger.data_utils import load_movements

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
movements_path = os.path.join(ROOT, "data", "inventory_movements.csv")
plots_dir = os.path.join(ROOT, "data", "plots")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("product_id", help="Product to plot (e.g., P001)")
    parser.add_argument("--out", help="Output PNG path", default=None)
    args = parser.parse_args()

    if not os.path.exists(movements_path):
        print("Movements not found:", movements_path)
        sys.exit(1)

    df = running_balance_frame(load_movements(movements_path))
    s = df[df["product_id"] == args.product_id]
    if s.empty:
        print("No movements for product:", args.product_id)
        sys.exit(1)

    os.makedirs(plots_dir, exist_ok=True)
    out_file = args.out or os.path.join(plots_dir, f"{args.product_id}_balance.png")
    dates = pd.to_datetime(s["movement_date"])

    fig, ax1 = plt.subplots(figsize=(12, 4))
    ax1.step(dates, s["running_balance"], where="post", label="running_balance")
    ax1.set_ylabel("Stock on hand")
    ax1.set_title(f"Running balance: {args.product_id}")

    # movement quantities as bars (secondary axis), OUT below zero
    ax2 = ax1.twinx()
    ax2.bar(dates, s["signed_quantity"], alpha=0.3, label="movement")
    ax2.set_ylabel("Movement quantity")

    lines, labels = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines + lines2, labels + labels2, loc="upper left")

    fig.tight_layout()
    plt.savefig(out_file, dpi=150)
    print("Saved plot:", out_file)


if __name__ == "__main__":
    main()
