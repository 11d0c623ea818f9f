"""
Synthetic inventory movement generator.

Functions:
 - make_rng(seed): explicit numpy random source (no global seeding)
 - generate_movements(...): OPENING followed by sorted IN/OUT movements for one product,
   never letting the running balance go negative
 - generate_movement_log(entity_ids, config, rng=None, opening_stocks=None): run the
   generator for several products in the given order against one random source

Random draws per product are consumed in this order:
  1. opening date
  2. the N movement dates (one batch, then sorted ascending)
  3. for each sorted date: kind, then quantity (no quantity draw when an OUT is skipped)
"""
import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from stockledger.config import GeneratorConfig
from stockledger.errors import InvalidParameter
from stockledger.movements import Movement, MovementKind

logger = logging.getLogger(__name__)


def make_rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


def _validate(entity_id: str, opening_stock: int, start: date, end: date, n_movements: int,
              inflow_range: Tuple[int, int], outflow_cap: int, opening_margin_days: int) -> None:
    if not entity_id:
        raise InvalidParameter("entity_id must be a non-empty string")
    if opening_stock < 0:
        raise InvalidParameter(f"opening_stock must be >= 0, got {opening_stock}")
    if n_movements < 0:
        raise InvalidParameter(f"movements_per_entity must be >= 0, got {n_movements}")
    lo, hi = inflow_range
    if lo < 1 or lo > hi:
        raise InvalidParameter(f"inflow_range must satisfy 1 <= min <= max, got {inflow_range}")
    if outflow_cap < 1:
        raise InvalidParameter(f"outflow_cap must be >= 1, got {outflow_cap}")
    if opening_margin_days < 0:
        raise InvalidParameter(f"opening_margin_days must be >= 0, got {opening_margin_days}")
    if start > end:
        raise InvalidParameter(f"date window start {start} is after end {end}")
    if start > end - timedelta(days=opening_margin_days):
        raise InvalidParameter(
            f"date window {start}..{end} leaves no room for an opening date "
            f"{opening_margin_days} days before the end"
        )


def _random_date(rng: np.random.Generator, start: date, end: date) -> date:
    span = (end - start).days
    return start + timedelta(days=int(rng.integers(0, span, endpoint=True)))


def generate_movements(
    entity_id: str,
    opening_stock: int,
    start: date,
    end: date,
    n_movements: int,
    rng: np.random.Generator,
    inflow_range: Tuple[int, int] = (20, 150),
    outflow_cap: int = 120,
    opening_margin_days: int = 90,
    first_sequence_id: int = 1,
) -> List[Movement]:
    """
    Generate OPENING + up to n_movements IN/OUT movements for one product.

    An OUT that cannot be covered by current stock is skipped entirely (no partial
    fulfilment), so the result may hold fewer than n_movements + 1 records.
    sequence_ids are contiguous starting at first_sequence_id.
    """
    _validate(entity_id, opening_stock, start, end, n_movements, inflow_range, outflow_cap, opening_margin_days)

    opening_date = _random_date(rng, start, end - timedelta(days=opening_margin_days))
    span = (end - opening_date).days
    offsets = np.sort(rng.integers(0, span, size=n_movements, endpoint=True))

    seq = first_sequence_id
    balance = opening_stock
    # OPENING is always recorded, even for zero stock
    out = [Movement(seq, entity_id, MovementKind.OPENING, opening_stock, opening_date)]
    seq += 1

    skipped = 0
    for offset in offsets:
        d = opening_date + timedelta(days=int(offset))
        if rng.integers(0, 2) == 0:
            qty = int(rng.integers(inflow_range[0], inflow_range[1], endpoint=True))
            balance += qty
            kind = MovementKind.INFLOW
        else:
            max_allowed = min(outflow_cap, balance)
            if max_allowed <= 0:
                skipped += 1
                continue
            qty = int(rng.integers(1, max_allowed, endpoint=True))
            balance -= qty
            kind = MovementKind.OUTFLOW
        out.append(Movement(seq, entity_id, kind, qty, d))
        seq += 1

    logger.debug("generated %d movements for %s (%d OUT skipped, closing balance %d)",
                 len(out), entity_id, skipped, balance)
    return out


def generate_movement_log(
    entity_ids: Iterable[str],
    config: GeneratorConfig,
    rng: Optional[np.random.Generator] = None,
    opening_stocks: Optional[Dict[str, int]] = None,
) -> List[Movement]:
    """
    Generate the full movement log for several products, processed in the given order.
    movement ids continue across products. rng defaults to make_rng(config.seed).
    opening_stocks optionally overrides config.opening_stock per product.
    """
    entity_ids = list(entity_ids)
    if len(set(entity_ids)) != len(entity_ids):
        raise InvalidParameter("entity_ids contains duplicates")
    opening_stocks = opening_stocks or {}
    unknown = set(opening_stocks) - set(entity_ids)
    if unknown:
        raise InvalidParameter(f"opening_stocks given for products not being generated: {sorted(unknown)}")

    start, end = config.date_window
    # validate every product before emitting anything
    for eid in entity_ids:
        _validate(eid, opening_stocks.get(eid, config.opening_stock), start, end,
                  config.movements_per_entity, config.inflow_range, config.outflow_cap,
                  config.opening_margin_days)

    rng = rng if rng is not None else make_rng(config.seed)
    log = []
    for eid in entity_ids:
        log.extend(generate_movements(
            entity_id=eid,
            opening_stock=opening_stocks.get(eid, config.opening_stock),
            start=start,
            end=end,
            n_movements=config.movements_per_entity,
            rng=rng,
            inflow_range=config.inflow_range,
            outflow_cap=config.outflow_cap,
            opening_margin_days=config.opening_margin_days,
            first_sequence_id=len(log) + 1,
        ))
    logger.info("generated %d movements for %d products", len(log), len(entity_ids))
    return log
