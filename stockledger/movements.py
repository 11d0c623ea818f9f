"""
Movement records for stockledger.

Functions:
 - signed_value: +quantity for OPENING/IN, -quantity for OUT
 - movements_to_frame: list of Movement -> persisted tabular shape
 - frame_to_movements: persisted tabular shape -> list of Movement (validated)

Persisted columns: movement_id, product_id, movement_type, quantity, movement_date
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List

import pandas as pd

from stockledger.errors import InvalidParameter

COLUMNS = ["movement_id", "product_id", "movement_type", "quantity", "movement_date"]


class MovementKind(str, Enum):
    OPENING = "OPENING"
    INFLOW = "IN"
    OUTFLOW = "OUT"


@dataclass(frozen=True)
class Movement:
    """One immutable, dated change to a product's stock. quantity is never signed."""
    sequence_id: int
    entity_id: str
    kind: MovementKind
    magnitude: int
    event_date: date

    @property
    def sort_key(self):
        return (self.event_date, self.sequence_id)


def signed_value(event: Movement) -> int:
    if event.kind == MovementKind.OUTFLOW:
        return -event.magnitude
    return event.magnitude


def movements_to_frame(movements: Iterable[Movement]) -> pd.DataFrame:
    rows = [
        {
            "movement_id": m.sequence_id,
            "product_id": m.entity_id,
            "movement_type": m.kind.value,
            "quantity": m.magnitude,
            "movement_date": m.event_date,
        }
        for m in movements
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def _whole_number(value, field: str, movement_id) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{field} must be a whole number (movement_id={movement_id}, {field}={value!r})") from None
    if pd.isna(number) or not number.is_integer():
        raise InvalidParameter(f"{field} must be a whole number (movement_id={movement_id}, {field}={value!r})")
    return int(number)


def _movement_date(value, movement_id) -> date:
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidParameter(f"invalid movement_date {value!r} (movement_id={movement_id})") from None
    if pd.isna(ts):
        raise InvalidParameter(f"movement_date is missing (movement_id={movement_id})")
    return ts.date()


def frame_to_movements(df: pd.DataFrame) -> List[Movement]:
    """
    Convert a movements DataFrame (e.g. read from CSV) back into Movement records.
    Raises InvalidParameter on missing columns or blank cells, unknown movement types,
    non-integral or non-positive quantities and unparseable dates.
    """
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        raise InvalidParameter(f"movements frame is missing columns: {missing}")

    out = []
    for row in df.itertuples(index=False):
        movement_id = _whole_number(row.movement_id, "movement_id", row.movement_id)
        if pd.isna(row.product_id) or not str(row.product_id).strip():
            raise InvalidParameter(f"product_id is missing (movement_id={movement_id})")
        try:
            kind = MovementKind(str(row.movement_type).strip())
        except ValueError:
            raise InvalidParameter(f"unknown movement_type {row.movement_type!r} (movement_id={movement_id})") from None
        qty = _whole_number(row.quantity, "quantity", movement_id)
        # OPENING may be zero, IN/OUT are strictly positive
        if qty < 0 or (qty == 0 and kind != MovementKind.OPENING):
            raise InvalidParameter(f"quantity must be positive (movement_id={movement_id}, quantity={qty})")
        out.append(Movement(
            sequence_id=movement_id,
            entity_id=str(row.product_id),
            kind=kind,
            magnitude=qty,
            event_date=_movement_date(row.movement_date, movement_id),
        ))
    return out
