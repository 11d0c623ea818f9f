"""
Read-side reports over the generated tables.

Functions:
 - enrich_movements: signed quantity per movement with the product's supplier_id / category_id
 - enrich_purchase_orders: purchase orders joined with delivery times and product keys, plus an on_time flag
 - supplier_order_summary: per-supplier order counts, spend and delivery stats, optionally
   filtered by supplier name (substring, case-insensitive) and earliest order date
"""
from datetime import date
from typing import Optional, Union

import numpy as np
import pandas as pd

from stockledger.movements import MovementKind


def enrich_movements(movements_df: pd.DataFrame, products: pd.DataFrame) -> pd.DataFrame:
    """
    movements_df uses the persisted layout (movement_id, product_id, movement_type, quantity, movement_date).
    Returns movement_id, product_id, supplier_id, category_id, movement_date, quantity
    where quantity is negative for OUT movements. Products missing from `products` keep NaN keys.
    """
    df = movements_df.copy()
    df["product_id"] = df["product_id"].astype(str)
    sign = np.where(df["movement_type"] == MovementKind.OUTFLOW.value, -1, 1)
    df["quantity"] = df["quantity"].astype(int) * sign

    keys = products[["product_id", "supplier_id", "category_id"]].copy()
    keys["product_id"] = keys["product_id"].astype(str)
    df = df.merge(keys, on="product_id", how="left")
    return df[["movement_id", "product_id", "supplier_id", "category_id", "movement_date", "quantity"]]


def enrich_purchase_orders(purchase_orders: pd.DataFrame, deliveries: pd.DataFrame, products: pd.DataFrame) -> pd.DataFrame:
    """
    Expected columns:
      purchase_orders: order_id, product_id, order_date, quantity_ordered, total_cost
      deliveries: order_id, expected_lead_time_days, actual_lead_time_days,
                  expected_delivery_date, actual_delivery_date, delay_days
      products: product_id, category_id, supplier_id
    An order is "delayed" when delay_days > 0; anything else (including no delivery row) is "on time".
    """
    po = purchase_orders.copy()
    po["product_id"] = po["product_id"].astype(str)
    keys = products[["product_id", "category_id", "supplier_id"]].copy()
    keys["product_id"] = keys["product_id"].astype(str)

    df = po.merge(deliveries, on="order_id", how="left").merge(keys, on="product_id", how="left")
    df["on_time"] = np.where(df["delay_days"].fillna(0) > 0, "delayed", "on time")
    cols = [
        "order_id", "product_id", "category_id", "supplier_id", "order_date",
        "quantity_ordered", "total_cost", "expected_lead_time_days", "actual_lead_time_days",
        "expected_delivery_date", "actual_delivery_date", "delay_days", "on_time",
    ]
    return df[cols]


def supplier_order_summary(
    enriched_orders: pd.DataFrame,
    suppliers: pd.DataFrame,
    supplier: Optional[str] = None,
    order_date: Optional[Union[str, date]] = None,
) -> pd.DataFrame:
    """
    Summarise enriched purchase orders per supplier.

    suppliers: supplier_id, supplier_name, country, lead_time_days, on_time_rate, freight_cost
    Returns supplier_id, supplier_name, country, total_orders, total_spend, avg_order_size,
    lead_time_days, on_time_rate, freight_cost (one row per supplier with matching orders).
    """
    df = enriched_orders.merge(suppliers, on="supplier_id", how="left")
    if supplier:
        df = df[df["supplier_name"].str.contains(supplier, case=False, regex=False, na=False)]
    if order_date is not None:
        df = df[pd.to_datetime(df["order_date"]) >= pd.Timestamp(order_date)]

    group_cols = ["supplier_id", "supplier_name", "country", "lead_time_days", "on_time_rate", "freight_cost"]
    summary = df.groupby(group_cols, as_index=False, dropna=False).agg(
        total_orders=("order_id", "count"),
        total_spend=("total_cost", "sum"),
        avg_order_size=("quantity_ordered", "mean"),
    )
    summary["total_spend"] = summary["total_spend"].round(2)
    summary["on_time_rate"] = summary["on_time_rate"].round(2)
    cols = ["supplier_id", "supplier_name", "country", "total_orders", "total_spend",
            "avg_order_size", "lead_time_days", "on_time_rate", "freight_cost"]
    return summary[cols].sort_values("supplier_id").reset_index(drop=True)
