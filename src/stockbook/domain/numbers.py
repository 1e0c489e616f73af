"""Lenient numeric coercion for stored records.

Historical or hand-edited data can carry blanks, text or ``null`` where a
number is expected. Those values count as ``0`` and every occurrence is
recorded in a :class:`DataQualityLog` instead of failing the computation.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

log = logging.getLogger("stockbook.quality")


@dataclass
class DataQualityLog:
    counts: Counter = field(default_factory=Counter)

    def record(self, field_name: str, raw: Any) -> None:
        self.counts[field_name] += 1
        log.warning(
            "invalid_number field=%s raw=%r coerced=0", field_name, raw,
            extra={"fields": {"field": field_name, "raw": repr(raw)}},
        )

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def reset(self) -> None:
        self.counts.clear()


def _coerce(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def parse_number_or_zero(value: Any, field_name: str = "value", quality: DataQualityLog | None = None) -> float:
    num = _coerce(value)
    if num is None:
        if quality is not None:
            quality.record(field_name, value)
        else:
            log.warning("invalid_number field=%s raw=%r coerced=0", field_name, value)
        return 0.0
    return num


def parse_quantity_or_zero(value: Any, quality: DataQualityLog | None = None) -> float:
    return parse_number_or_zero(value, "quantity", quality)


def parse_price_or_zero(value: Any, quality: DataQualityLog | None = None) -> float:
    return parse_number_or_zero(value, "price", quality)


def parse_number_strict(value: Any) -> Optional[float]:
    """Return the number or ``None``; used by input validation, which rejects instead of coercing."""
    return _coerce(value)
