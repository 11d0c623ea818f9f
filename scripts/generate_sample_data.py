"""
Generate a sample dataset for stockledger.

Usage:
  python scripts/generate_sample_data.py
  python scripts/generate_sample_data.py --products 50 --config config.json

Produces:
 - data/products.csv             (product_id, product_name, supplier_id, category_id)
 - data/inventory_movements.csv  (movement_id, product_id, movement_type, quantity, movement_date)
"""
import argparse
import logging
import os

import pandas as pd

from stockledger.config import GeneratorConfig, load_config
from stockledger.data_utils import save_movements, save_products
from stockledger.generator import generate_movement_log, make_rng

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DATA_DIR = os.path.join(ROOT, "data")

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_products(n_products: int, rng) -> pd.DataFrame:
    ids = [f"P{i:03d}" for i in range(1, n_products + 1)]
    return pd.DataFrame({
        "product_id": ids,
        "product_name": [f"Product {i[1:]}" for i in ids],
        "supplier_id": rng.integers(1, 11, size=n_products),
        "category_id": rng.integers(1, 6, size=n_products),
    })


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--products", type=int, default=20)
    parser.add_argument("--config", help="JSON generator config", default=None)
    parser.add_argument("--out", help="Output directory", default=DATA_DIR)
    args = parser.parse_args()

    config = load_config(args.config) if args.config else GeneratorConfig()
    rng = make_rng(config.seed)

    # product attributes consume the random stream before any movement
    products = build_products(args.products, rng)
    log = generate_movement_log(products["product_id"].tolist(), config, rng=rng)

    products_path = save_products(products, os.path.join(args.out, "products.csv"))
    movements_path = save_movements(log, os.path.join(args.out, "inventory_movements.csv"))

    print("Generated:")
    print(" -", products_path)
    print(" -", movements_path)


if __name__ == "__main__":
    main()
