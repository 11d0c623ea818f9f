from datetime import date

import pandas as pd
import pytest

from stockledger.movements import Movement, MovementKind, movements_to_frame
from stockledger.reporting import enrich_movements, enrich_purchase_orders, supplier_order_summary


@pytest.fixture
def products():
    return pd.DataFrame({
        "product_id": ["P1", "P2", "P3"],
        "product_name": ["Widget", "Gadget", "Gizmo"],
        "supplier_id": [1, 2, 1],
        "category_id": [10, 20, 10],
    })


@pytest.fixture
def enriched_orders(products):
    purchase_orders = pd.DataFrame({
        "order_id": [1, 2, 3, 4],
        "product_id": ["P1", "P2", "P3", "P1"],
        "order_date": ["2025-01-05", "2025-02-10", "2025-03-01", "2025-04-01"],
        "quantity_ordered": [100, 50, 30, 70],
        "total_cost": [1000.0, 500.5, 300.0, 700.0],
    })
    deliveries = pd.DataFrame({
        "order_id": [1, 2, 3],
        "expected_lead_time_days": [5, 5, 5],
        "actual_lead_time_days": [7, 5, 4],
        "expected_delivery_date": ["2025-01-10", "2025-02-15", "2025-03-06"],
        "actual_delivery_date": ["2025-01-12", "2025-02-15", "2025-03-05"],
        "delay_days": [2, 0, -1],
    })
    return enrich_purchase_orders(purchase_orders, deliveries, products)


@pytest.fixture
def suppliers():
    return pd.DataFrame({
        "supplier_id": [1, 2],
        "supplier_name": ["Cohen Ltd", "Smith and Sons"],
        "country": ["Israel", "UK"],
        "lead_time_days": [5, 7],
        "on_time_rate": [0.876, 0.5],
        "freight_cost": [100.0, 50.0],
    })


def test_enrich_movements_signs_and_keys(products):
    d = date(2025, 1, 1)
    log = [
        Movement(1, "P1", MovementKind.OPENING, 100, d),
        Movement(2, "P1", MovementKind.OUTFLOW, 30, d),
        Movement(3, "P9", MovementKind.INFLOW, 20, d),
    ]
    df = enrich_movements(movements_to_frame(log), products)
    assert df["quantity"].tolist() == [100, -30, 20]
    assert df["supplier_id"].iloc[0] == 1
    assert df["category_id"].iloc[1] == 10
    # product missing from the products table keeps empty keys
    assert pd.isna(df["supplier_id"].iloc[2])


def test_enrich_purchase_orders_on_time_flag(enriched_orders):
    assert enriched_orders["on_time"].tolist() == ["delayed", "on time", "on time", "on time"]
    assert enriched_orders["supplier_id"].tolist() == [1, 2, 1, 1]


def test_supplier_summary_all(enriched_orders, suppliers):
    summary = supplier_order_summary(enriched_orders, suppliers)
    assert summary["supplier_id"].tolist() == [1, 2]
    cohen = summary.iloc[0]
    assert cohen["total_orders"] == 3
    assert cohen["total_spend"] == pytest.approx(2000.0)
    assert cohen["avg_order_size"] == pytest.approx(200 / 3)
    assert cohen["on_time_rate"] == pytest.approx(0.88)
    assert summary.iloc[1]["total_spend"] == pytest.approx(500.5)


def test_supplier_summary_name_filter_is_case_insensitive(enriched_orders, suppliers):
    summary = supplier_order_summary(enriched_orders, suppliers, supplier="cohen")
    assert summary["supplier_name"].tolist() == ["Cohen Ltd"]


def test_supplier_summary_order_date_filter(enriched_orders, suppliers):
    summary = supplier_order_summary(enriched_orders, suppliers, order_date="2025-03-01")
    assert summary["supplier_id"].tolist() == [1]
    assert summary.iloc[0]["total_orders"] == 2
    assert summary.iloc[0]["total_spend"] == pytest.approx(1000.0)
