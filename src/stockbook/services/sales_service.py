from __future__ import annotations

import logging
from typing import Any, Optional

from stockbook.domain.errors import InsufficientStockError, NotFoundError
from stockbook.domain.models import SaleEvent, StockEvent
from stockbook.repositories.event_store import EventStore
from stockbook.services.forms import entry_date, require_price, require_product, require_quantity
from stockbook.services.ledger import available_products, available_quantity, latest_price
from stockbook.services.undo import UndoBuffer

log = logging.getLogger("stockbook.sales")


def validate_sale(
    form: dict[str, Any],
    stock: list[StockEvent],
    sales: list[SaleEvent],
    editing_id: Optional[str] = None,
) -> SaleEvent:
    """
    form: {productName, quantity, price, date, customerName}

    Returns the finalized sale. When ``editing_id`` is given the replaced
    record's quantity counts as available again, provided it was for the
    same product.
    """
    product = require_product(form.get("productName"))
    qty = require_quantity(form.get("quantity"))

    available = available_quantity(product, stock, sales)
    if editing_id is not None:
        original = next((s for s in sales if s.id == editing_id), None)
        if original is None:
            raise NotFoundError("Sale not found.")
        if original.product_name == product:
            available += original.quantity

    if qty > available:
        raise InsufficientStockError(f"Only {available:g} units available in stock.", available=available)

    price = require_price(form.get("price"))
    return SaleEvent.create(
        product_name=product,
        quantity=qty,
        price=price,
        date=entry_date(form.get("date")),
        customer_name=(str(form.get("customerName") or "").strip() or None),
        id=editing_id,
    )


class SalesService:
    def __init__(self, repo: EventStore, undo_capacity: int = 1):
        self.repo = repo
        self.undo = UndoBuffer[SaleEvent](undo_capacity)

    def list_sales(self) -> list[SaleEvent]:
        return self.repo.load_sales()

    def available_quantity(self, product_name: str) -> float:
        return available_quantity(product_name, self.repo.load_stock(), self.repo.load_sales())

    def suggested_price(self, product_name: str) -> Optional[float]:
        return latest_price(product_name, self.repo.load_stock())

    def available_products(self) -> list[str]:
        return available_products(self.repo.load_stock(), self.repo.load_sales())

    def create_sale(self, form: dict[str, Any]) -> SaleEvent:
        stock = self.repo.load_stock()
        sales = self.repo.load_sales()
        sale = validate_sale(form, stock, sales)

        self.repo.save_sales(sales + [sale])
        log.info("sale_created id=%s product=%s qty=%s total=%.2f", sale.id, sale.product_name, sale.quantity, sale.total_price)
        return sale

    def update_sale(self, sale_id: str, form: dict[str, Any]) -> SaleEvent:
        stock = self.repo.load_stock()
        sales = self.repo.load_sales()
        sale = validate_sale(form, stock, sales, editing_id=sale_id)

        self.repo.save_sales([sale if s.id == sale_id else s for s in sales])
        log.info("sale_updated id=%s product=%s qty=%s total=%.2f", sale.id, sale.product_name, sale.quantity, sale.total_price)
        return sale

    def delete_sale(self, sale_id: str) -> SaleEvent:
        sales = self.repo.load_sales()
        target = next((s for s in sales if s.id == sale_id), None)
        if target is None:
            raise NotFoundError("Sale not found.")

        self.repo.save_sales([s for s in sales if s.id != sale_id])
        self.undo.push(target)
        log.info("sale_deleted id=%s product=%s", target.id, target.product_name)
        return target

    def undo_delete(self) -> Optional[SaleEvent]:
        """Re-append the most recently deleted sale if the stock still covers it."""
        sale = self.undo.peek()
        if sale is None:
            return None
        stock = self.repo.load_stock()
        sales = self.repo.load_sales()
        available = available_quantity(sale.product_name, stock, sales)
        if sale.quantity > available:
            raise InsufficientStockError(f"Only {available:g} units available in stock.", available=available)

        self.repo.save_sales(sales + [sale])
        self.undo.pop()
        log.info("sale_restored id=%s product=%s", sale.id, sale.product_name)
        return sale

    def search_sales(self, text: str = "", sort_key: str = "date", descending: bool = False) -> list[SaleEvent]:
        needle = text.lower()
        rows = [
            s for s in self.repo.load_sales()
            if needle in s.product_name.lower() or (s.customer_name and needle in s.customer_name.lower())
        ]
        rows.sort(key=lambda s: (getattr(s, sort_key) is None, getattr(s, sort_key)), reverse=descending)
        return rows
