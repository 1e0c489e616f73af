from __future__ import annotations

from stockbook.domain.models import InventoryRow, InventoryTotals, SaleEvent, StockEvent
from stockbook.repositories.event_store import EventStore

STATUS_NEGATIVE = "Negative"
STATUS_OUT_OF_STOCK = "Out of Stock"
STATUS_LOW_STOCK = "Low Stock"
STATUS_IN_STOCK = "In Stock"

LOW_STOCK_THRESHOLD = 5


def stock_status(remaining: float) -> str:
    if remaining < 0:
        return STATUS_NEGATIVE
    if remaining == 0:
        return STATUS_OUT_OF_STOCK
    if remaining < LOW_STOCK_THRESHOLD:
        return STATUS_LOW_STOCK
    return STATUS_IN_STOCK


def _row(product: str, stock: list[StockEvent], sales: list[SaleEvent]) -> InventoryRow:
    bought = [e for e in stock if e.product_name == product]
    sold = [e for e in sales if e.product_name == product]

    opening = sum(e.quantity for e in bought)
    sold_qty = sum(e.quantity for e in sold)
    remaining = opening - sold_qty

    total_cost = sum(e.price * e.quantity for e in bought)
    total_sell = sum(e.price * e.quantity for e in sold)
    avg_cost = total_cost / opening if opening > 0 else 0.0
    avg_sell = total_sell / sold_qty if sold_qty > 0 else 0.0
    margin = avg_sell - avg_cost

    return InventoryRow(
        product_name=product,
        opening_stock=opening,
        sold_quantity=sold_qty,
        remaining_stock=remaining,
        total_cost=total_cost,
        avg_cost_price=avg_cost,
        total_sell=total_sell,
        avg_sell_price=avg_sell,
        profit_margin=margin,
        total_profit=margin * sold_qty,
        stock_value=remaining * avg_cost,
        status=stock_status(remaining),
    )


def build_inventory(stock: list[StockEvent], sales: list[SaleEvent]) -> list[InventoryRow]:
    """One row per product name seen in either log, ordered by name."""
    products = sorted({e.product_name for e in stock} | {e.product_name for e in sales})
    return [_row(p, stock, sales) for p in products]


def filter_inventory(rows: list[InventoryRow], search: str = "") -> list[InventoryRow]:
    needle = (search or "").lower()
    visible = [r for r in rows if needle in r.product_name.lower()]
    return sorted(visible, key=lambda r: r.total_profit, reverse=True)


def inventory_totals(rows: list[InventoryRow]) -> InventoryTotals:
    return InventoryTotals(
        opening_stock=sum(r.opening_stock for r in rows),
        sold_quantity=sum(r.sold_quantity for r in rows),
        remaining_stock=sum(r.remaining_stock for r in rows),
        total_profit=sum(r.total_profit for r in rows),
        stock_value=sum(r.stock_value for r in rows),
    )


class InventoryService:
    def __init__(self, repo: EventStore):
        self.repo = repo

    def list_inventory(self) -> list[InventoryRow]:
        return build_inventory(self.repo.load_stock(), self.repo.load_sales())

    def inventory_view(self, search: str = "") -> tuple[list[InventoryRow], InventoryTotals]:
        rows = filter_inventory(self.list_inventory(), search)
        return rows, inventory_totals(rows)

    def low_stock(self) -> list[InventoryRow]:
        return [r for r in self.list_inventory() if r.status != STATUS_IN_STOCK]
