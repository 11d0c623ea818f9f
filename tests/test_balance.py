import random
from datetime import date, datetime, timedelta

import pandas as pd
import pytest

from stockledger.balance import BalanceLedger, running_balance_frame, snapshot, snapshot_frame
from stockledger.config import GeneratorConfig
from stockledger.errors import UnknownEntity
from stockledger.generator import generate_movement_log
from stockledger.movements import Movement, MovementKind, signed_value

BASE = date(2025, 1, 1)


def day(n):
    return BASE + timedelta(days=n)


def hand_log():
    return [
        Movement(1, "P1", MovementKind.OPENING, 100, day(1)),
        Movement(2, "P1", MovementKind.INFLOW, 50, day(5)),
        Movement(3, "P1", MovementKind.OUTFLOW, 30, day(10)),
    ]


def test_point_in_time_balances():
    ledger = BalanceLedger(hand_log())
    assert ledger.balance_of("P1", day(3)) == 100
    assert ledger.balance_of("P1", day(7)) == 150
    assert ledger.balance_of("P1", day(10)) == 120
    assert ledger.balance_of("P1", day(0)) == 0


def test_snapshot_function():
    assert snapshot(hand_log(), day(7)) == {"P1": 150}
    assert snapshot([], day(7)) == {}


def test_same_day_movements_ordered_by_movement_id():
    log = [
        Movement(3, "P1", MovementKind.INFLOW, 5, day(1)),
        Movement(1, "P1", MovementKind.OPENING, 10, day(1)),
        Movement(2, "P1", MovementKind.OUTFLOW, 10, day(1)),
    ]
    assert snapshot(log, day(1)) == {"P1": 5}
    frame = running_balance_frame(log)
    # cumulative in movement_id order: 10, 0, 5
    assert frame["running_balance"].tolist() == [10, 0, 5]


def test_shuffled_log_gives_same_snapshot():
    log = generate_movement_log(["P1", "P2", "P3"], GeneratorConfig(movements_per_entity=25, seed=4))
    shuffled = list(log)
    random.Random(0).shuffle(shuffled)
    for d in [date(2025, 3, 1), date(2025, 7, 15), date(2025, 12, 31)]:
        assert snapshot(shuffled, d) == snapshot(log, d)


def test_ledger_matches_full_rescan():
    log = generate_movement_log(["P1", "P2"], GeneratorConfig(movements_per_entity=40, seed=8))
    ledger = BalanceLedger(log)
    for d in [date(2024, 12, 31), date(2025, 2, 14), date(2025, 6, 30), date(2025, 12, 31)]:
        expected = {
            eid: sum(signed_value(m) for m in log if m.entity_id == eid and m.event_date <= d)
            for eid in ["P1", "P2"]
        }
        assert ledger.snapshot(d) == expected


def test_generated_balances_non_negative_at_every_date():
    log = generate_movement_log(["P1", "P2", "P3"], GeneratorConfig(opening_stock=0, movements_per_entity=50, seed=2))
    ledger = BalanceLedger(log)
    for m in log:
        assert ledger.balance_of(m.entity_id, m.event_date) >= 0


def test_registry_reports_products_without_history():
    result = snapshot(hand_log(), day(7), registry=["P1", "P2"])
    assert result == {"P1": 150, "P2": 0}


def test_registry_unknown_product_query():
    ledger = BalanceLedger(hand_log(), registry=["P1", "P2"])
    assert ledger.balance_of("P2", day(7)) == 0
    with pytest.raises(UnknownEntity):
        ledger.balance_of("P9", day(7))


def test_registry_rejects_movements_for_unknown_products():
    with pytest.raises(UnknownEntity):
        BalanceLedger(hand_log(), registry=["P2"])


def test_without_registry_unseen_product_is_zero():
    assert BalanceLedger(hand_log()).balance_of("P9", day(7)) == 0


def test_repeated_queries_are_side_effect_free():
    log = hand_log()
    before = list(log)
    ledger = BalanceLedger(log)
    first = ledger.snapshot(day(7))
    second = ledger.snapshot(day(7))
    assert first == second
    assert snapshot(log, day(7)) == snapshot(log, day(7))
    assert log == before


def test_as_of_accepts_datetime_and_strings():
    ledger = BalanceLedger(hand_log())
    assert ledger.balance_of("P1", datetime(2025, 1, 6, 23, 59)) == 150
    assert ledger.balance_of("P1", "2025-01-06") == 150
    assert ledger.balance_of("P1", pd.Timestamp("2025-01-11")) == 120


def test_running_balance_frame():
    frame = running_balance_frame(hand_log())
    assert frame["signed_quantity"].tolist() == [100, 50, -30]
    assert frame["running_balance"].tolist() == [100, 150, 120]


def test_snapshot_frame_with_products():
    products = pd.DataFrame({"product_id": ["P1", "P2"], "product_name": ["Widget", "Gadget"]})
    frame = snapshot_frame(hand_log(), day(10), products=products)
    assert frame.columns.tolist() == ["product_id", "product_name", "quantity_on_hand"]
    assert frame["quantity_on_hand"].tolist() == [120, 0]


def test_snapshot_frame_without_products():
    frame = snapshot_frame(hand_log(), day(3))
    assert frame.to_dict(orient="records") == [{"product_id": "P1", "quantity_on_hand": 100}]


def test_large_registry_snapshot():
    registry = [f"P{i}" for i in range(50_000)]
    ledger = BalanceLedger(hand_log(), registry=["P1"] + registry)
    result = ledger.snapshot(day(7))
    assert len(result) == 50_000
    assert result["P1"] == 150
    assert result["P49999"] == 0
