from __future__ import annotations

from datetime import date as date_cls
from typing import Any

from stockbook.domain.errors import ValidationError
from stockbook.domain.numbers import parse_number_strict


def require_product(name: Any) -> str:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise ValidationError("Product is required.")
    return cleaned


def require_quantity(value: Any) -> float:
    qty = parse_number_strict(value)
    if qty is None:
        raise ValidationError("Quantity must be a valid number.")
    if qty <= 0:
        raise ValidationError("Quantity must be > 0.")
    return qty


def require_price(value: Any) -> float:
    price = parse_number_strict(value)
    if price is None:
        raise ValidationError("Price must be a valid number.")
    if price <= 0:
        raise ValidationError("Price must be > 0.")
    return price


def entry_date(value: Any) -> str:
    if not value:
        return date_cls.today().isoformat()
    raw = str(value).strip()
    try:
        return date_cls.fromisoformat(raw).isoformat()
    except ValueError as exc:
        raise ValidationError(f"Date must be YYYY-MM-DD. Received: {raw}") from exc
