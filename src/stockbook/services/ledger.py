"""All-time quantity balance per product.

The balance ignores dates: every stock entry adds, every sale subtracts.
"""
from __future__ import annotations

from typing import Iterable, Optional

from stockbook.domain.models import SaleEvent, StockEvent


def total_stocked(product: str, stock: Iterable[StockEvent]) -> float:
    return sum(e.quantity for e in stock if e.product_name == product)


def total_sold(product: str, sales: Iterable[SaleEvent]) -> float:
    return sum(e.quantity for e in sales if e.product_name == product)


def available_quantity(product: str, stock: Iterable[StockEvent], sales: Iterable[SaleEvent]) -> float:
    """Stocked minus sold. Negative for products never stocked but sold; treat ``<= 0`` as unavailable."""
    return total_stocked(product, stock) - total_sold(product, sales)


def latest_price(product: str, stock: Iterable[StockEvent]) -> Optional[float]:
    """
    Price of the most recently *inserted* stock entry for ``product``.

    Log order stands in for recency, so an entry backfilled with an older
    date still wins here. ``None`` when the product was never stocked.
    """
    price = None
    for e in stock:
        if e.product_name == product:
            price = e.price
    return price


def available_products(stock: list[StockEvent], sales: list[SaleEvent]) -> list[str]:
    names = {e.product_name for e in stock}
    return sorted(n for n in names if available_quantity(n, stock, sales) > 0)
