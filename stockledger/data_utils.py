"""
Data utilities for stockledger.
Functions:
 - load_products: read products.csv (product_id, product_name[, supplier_id, category_id])
 - load_movements: read inventory_movements.csv and return validated Movement records
 - save_movements: write Movement records in the persisted column layout
 - save_products: write a products DataFrame
"""
import os
from typing import Iterable, List

import pandas as pd

from stockledger.errors import InvalidParameter
from stockledger.movements import Movement, frame_to_movements, movements_to_frame


def load_products(path) -> pd.DataFrame:
    """
    Load products CSV (path or file-like, e.g. a Streamlit upload). Expected columns: product_id, product_name
    product_id is always read as a string so it matches Movement.entity_id.
    """
    df = pd.read_csv(path, dtype={"product_id": str})
    # normalize column names
    df = df.rename(columns=lambda c: c.strip())
    if "product_id" not in df.columns or "product_name" not in df.columns:
        raise InvalidParameter("products CSV must contain 'product_id' and 'product_name' columns")
    return df


def load_movements(path) -> List[Movement]:
    """
    Load movements CSV (path or file-like). Expected columns: movement_id, product_id, movement_type, quantity, movement_date
    """
    df = pd.read_csv(path, dtype={"product_id": str})
    df = df.rename(columns=lambda c: c.strip())
    return frame_to_movements(df)


def save_movements(movements: Iterable[Movement], path: str) -> str:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    movements_to_frame(movements).to_csv(path, index=False)
    return path


def save_products(products: pd.DataFrame, path: str) -> str:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    products.to_csv(path, index=False)
    return path
