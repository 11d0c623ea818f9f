"""
Print the stock on hand of every product as of a date.
Usage:
  python scripts/run_snapshot.py 2025-11-30
  python scripts/run_snapshot.py 2025-11-30 --movements data/inventory_movements.csv --products data/products.csv

Outputs:
  - prints a JSON list of {product_id, product_name, quantity_on_hand}
  - writes `data/snapshot_<date>.json`
"""
import argparse
import json
import logging
import os

import pandas as pd

from stockledger.balance import snapshot_frame
from stockledger.data_utils import load_movements, load_products

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DATA_DIR = os.path.join(ROOT, "data")
OUT_DIR = DATA_DIR

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("as_of", help="Snapshot date (YYYY-MM-DD)")
    parser.add_argument("--movements", default=os.path.join(DATA_DIR, "inventory_movements.csv"))
    parser.add_argument("--products", default=os.path.join(DATA_DIR, "products.csv"))
    args = parser.parse_args()

    as_of = pd.Timestamp(args.as_of).date()
    log = load_movements(args.movements)
    products = load_products(args.products) if os.path.exists(args.products) else None

    snap = snapshot_frame(log, as_of, products=products)
    records = snap.to_dict(orient="records")

    os.makedirs(OUT_DIR, exist_ok=True)
    out_path = os.path.join(OUT_DIR, f"snapshot_{as_of.strftime('%Y%m%d')}.json")
    with open(out_path, "w", encoding="utf8") as f:
        json.dump(records, f, indent=2, default=str)
    print("Wrote snapshot to:", out_path)
    print(json.dumps(records, indent=2, default=str))


if __name__ == "__main__":
    main()
