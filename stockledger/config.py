"""
Generator configuration.

GeneratorConfig holds the recognised options:
  opening_stock, movements_per_entity, inflow_range, outflow_cap, date_window, seed
plus opening_margin_days (trailing days kept free after the latest possible opening date).
"""
import json
from datetime import date
from typing import Tuple

from pydantic import BaseModel, ValidationError

from stockledger.errors import InvalidParameter


class GeneratorConfig(BaseModel):
    opening_stock: int = 200
    movements_per_entity: int = 30
    inflow_range: Tuple[int, int] = (20, 150)
    outflow_cap: int = 120
    date_window: Tuple[date, date] = (date(2025, 1, 1), date(2025, 12, 31))
    seed: int = 42
    opening_margin_days: int = 90


def load_config(path: str) -> GeneratorConfig:
    """Read a GeneratorConfig from a JSON file. Missing keys take their defaults."""
    with open(path, "r", encoding="utf8") as f:
        raw = json.load(f)
    try:
        return GeneratorConfig.model_validate(raw)
    except ValidationError as e:
        raise InvalidParameter(f"invalid generator config in {path}: {e}") from e
