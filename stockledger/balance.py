"""
Point-in-time stock balances over a movement log.

 - BalanceLedger: partitions the log per product once and keeps the running balance
   after every movement (ordered by movement_date, then movement_id); answers
   "balance as of D" for any number of dates without touching the log again
 - snapshot(log, as_of, registry=None): balance of every known product as of a date
 - snapshot_frame(...): same as a DataFrame (product_id[, product_name], quantity_on_hand)
 - running_balance_frame(log): every movement with its signed quantity and running balance

A product with no movement on or before the query date has balance 0.
"""
import logging
from bisect import bisect_right
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

import pandas as pd

from stockledger.errors import UnknownEntity
from stockledger.movements import Movement, movements_to_frame, signed_value

logger = logging.getLogger(__name__)


def _as_date(value) -> date:
    # datetime (and pd.Timestamp) subclass date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


class BalanceLedger:
    """
    Running balances per product, built once from an immutable movement log.

    If registry is given, it is the full set of known products: every one of them
    is reported (0 without history), and movements or queries for products outside
    it raise UnknownEntity. Without a registry the known products are those in the log.
    """

    def __init__(self, log: Iterable[Movement], registry: Optional[Iterable[str]] = None):
        self.registry = None if registry is None else list(dict.fromkeys(registry))
        self._allowed = None if self.registry is None else set(self.registry)

        partitions = defaultdict(list)
        for m in log:
            if self._allowed is not None and m.entity_id not in self._allowed:
                raise UnknownEntity(m.entity_id)
            partitions[m.entity_id].append(m)

        self._dates = {}
        self._balances = {}
        for entity_id, events in partitions.items():
            events.sort(key=lambda m: m.sort_key)
            dates, balances = [], []
            running = 0
            for m in events:
                running += signed_value(m)
                dates.append(m.event_date)
                balances.append(running)
            self._dates[entity_id] = dates
            self._balances[entity_id] = balances

        logger.debug("built ledger: %d products, %d movements",
                     len(self._dates), sum(len(d) for d in self._dates.values()))

    @property
    def entities(self) -> List[str]:
        if self.registry is not None:
            return list(self.registry)
        return sorted(self._dates)

    def balance_of(self, entity_id: str, as_of) -> int:
        if self._allowed is not None and entity_id not in self._allowed:
            raise UnknownEntity(entity_id)
        dates = self._dates.get(entity_id)
        if not dates:
            return 0
        i = bisect_right(dates, _as_date(as_of))
        if i == 0:
            return 0
        return self._balances[entity_id][i - 1]

    def snapshot(self, as_of) -> Dict[str, int]:
        d = _as_date(as_of)
        return {entity_id: self.balance_of(entity_id, d) for entity_id in self.entities}


def snapshot(log: Iterable[Movement], as_of, registry: Optional[Iterable[str]] = None) -> Dict[str, int]:
    """Balance of every known product as of as_of (inclusive)."""
    return BalanceLedger(log, registry=registry).snapshot(as_of)


def snapshot_frame(log: Iterable[Movement], as_of, products: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Snapshot as a DataFrame with columns product_id, quantity_on_hand.
    When a products frame (product_id, product_name) is given it acts as the registry
    and product_name is included.
    """
    if products is None:
        balances = snapshot(log, as_of)
        return pd.DataFrame(list(balances.items()), columns=["product_id", "quantity_on_hand"])

    registry = products["product_id"].astype(str).tolist()
    balances = snapshot(log, as_of, registry=registry)
    out = products[["product_id", "product_name"]].copy()
    out["product_id"] = out["product_id"].astype(str)
    out["quantity_on_hand"] = out["product_id"].map(balances).astype(int)
    return out.reset_index(drop=True)


def running_balance_frame(log: Iterable[Movement]) -> pd.DataFrame:
    """
    Every movement with signed_quantity and running_balance columns, sorted by
    product_id, movement_date, movement_id. Used for charts and exports.
    """
    log = list(log)
    df = movements_to_frame(log)
    df["signed_quantity"] = [signed_value(m) for m in log]
    df = df.sort_values(["product_id", "movement_date", "movement_id"], kind="mergesort").reset_index(drop=True)
    df["running_balance"] = df.groupby("product_id")["signed_quantity"].cumsum()
    return df
