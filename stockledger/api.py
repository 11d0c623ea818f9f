# stockledger/api.py
"""
Lightweight FastAPI that generates movement logs and returns point-in-time stock snapshots.
Run with:
  uvicorn stockledger.api:app --reload --port 8000
"""
import os
import pathlib
from datetime import date
from typing import Dict, List, Optional

import pandas as pd
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from stockledger.balance import BalanceLedger
from stockledger.config import GeneratorConfig
from stockledger.data_utils import load_movements
from stockledger.errors import InvalidParameter, UnknownEntity
from stockledger.generator import generate_movement_log
from stockledger.movements import COLUMNS, Movement, MovementKind, frame_to_movements

ROOT = str(pathlib.Path(__file__).resolve().parents[1])

app = FastAPI(title="stockledger API", version="0.1")


class MovementRecord(BaseModel):
    movement_id: int
    product_id: str
    movement_type: MovementKind
    quantity: int = Field(ge=0)
    movement_date: date

    @classmethod
    def from_movement(cls, m: Movement) -> "MovementRecord":
        return cls(movement_id=m.sequence_id, product_id=m.entity_id, movement_type=m.kind,
                   quantity=m.magnitude, movement_date=m.event_date)


def records_to_movements(records: List[MovementRecord]) -> List[Movement]:
    """Inline records go through the same checks as a CSV log."""
    frame = pd.DataFrame([r.model_dump(mode="json") for r in records], columns=COLUMNS)
    return frame_to_movements(frame)


class GenerateRequest(BaseModel):
    product_ids: List[str]
    config: GeneratorConfig = GeneratorConfig()
    opening_stocks: Optional[Dict[str, int]] = None


class SnapshotRequest(BaseModel):
    as_of: date
    movements: Optional[List[MovementRecord]] = None  # inline log; otherwise read from movements_path
    movements_path: Optional[str] = None
    registry: Optional[List[str]] = None


@app.post("/movements/generate")
def generate(req: GenerateRequest):
    try:
        log = generate_movement_log(req.product_ids, req.config, opening_stocks=req.opening_stocks)
    except InvalidParameter as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"count": len(log), "movements": [MovementRecord.from_movement(m) for m in log]}


@app.post("/snapshot")
def snapshot(req: SnapshotRequest):
    if req.movements is not None:
        try:
            log = records_to_movements(req.movements)
        except InvalidParameter as e:
            raise HTTPException(status_code=422, detail=str(e))
    else:
        path = req.movements_path or os.path.join(ROOT, "data", "inventory_movements.csv")
        if not os.path.exists(path):
            raise HTTPException(status_code=404, detail=f"movements file not found: {path}")
        try:
            log = load_movements(path)
        except InvalidParameter as e:
            raise HTTPException(status_code=422, detail=str(e))

    try:
        ledger = BalanceLedger(log, registry=req.registry)
    except UnknownEntity as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"as_of": str(req.as_of), "balances": ledger.snapshot(req.as_of)}


@app.get("/balance/{product_id}")
def balance(product_id: str, as_of: date, movements_path: Optional[str] = None):
    path = movements_path or os.path.join(ROOT, "data", "inventory_movements.csv")
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail=f"movements file not found: {path}")
    try:
        ledger = BalanceLedger(load_movements(path))
    except InvalidParameter as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"product_id": product_id, "as_of": str(as_of), "quantity_on_hand": ledger.balance_of(product_id, as_of)}
