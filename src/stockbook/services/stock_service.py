from __future__ import annotations

import logging
from typing import Any, Optional

from stockbook.domain.errors import ConfirmationRequiredError, DuplicateEntryError, NotFoundError
from stockbook.domain.models import StockEvent
from stockbook.repositories.event_store import EventStore
from stockbook.services.forms import entry_date, require_price, require_product, require_quantity
from stockbook.services.ledger import latest_price
from stockbook.services.undo import UndoBuffer

log = logging.getLogger("stockbook.stock")

LARGE_ENTRY_THRESHOLD = 1000


def is_large_entry(quantity: float, price: float) -> bool:
    return quantity > LARGE_ENTRY_THRESHOLD or price > LARGE_ENTRY_THRESHOLD


def find_duplicate(
    stock: list[StockEvent], product_name: str, date: str, exclude_id: Optional[str] = None
) -> Optional[StockEvent]:
    for e in stock:
        if e.product_name == product_name and e.date == date and e.id != exclude_id:
            return e
    return None


class StockService:
    def __init__(self, repo: EventStore, undo_capacity: int = 1):
        self.repo = repo
        self.undo = UndoBuffer[StockEvent](undo_capacity)

    def list_entries(self) -> list[StockEvent]:
        return self.repo.load_stock()

    def latest_price(self, product_name: str) -> Optional[float]:
        return latest_price(product_name, self.repo.load_stock())

    def _build(self, form: dict[str, Any], entry_id: Optional[str], confirm_large: bool) -> StockEvent:
        product = require_product(form.get("productName"))
        qty = require_quantity(form.get("quantity"))
        price = require_price(form.get("price"))
        day = entry_date(form.get("date"))
        if is_large_entry(qty, price) and not confirm_large:
            raise ConfirmationRequiredError(
                f"Quantity or price above {LARGE_ENTRY_THRESHOLD}; confirm the entry to save it."
            )
        return StockEvent.create(product, qty, price, day, id=entry_id)

    def add_entry(self, form: dict[str, Any], confirm_large: bool = False) -> StockEvent:
        """
        form: {productName, quantity, price, date}

        ``totalPrice`` is always recomputed; any value in the form is ignored.
        """
        entry = self._build(form, None, confirm_large)
        stock = self.repo.load_stock()
        if find_duplicate(stock, entry.product_name, entry.date):
            raise DuplicateEntryError("A stock entry for this product and date already exists.")

        self.repo.save_stock(stock + [entry])
        log.info("stock_added id=%s product=%s qty=%s price=%.2f", entry.id, entry.product_name, entry.quantity, entry.price)
        return entry

    def update_entry(self, entry_id: str, form: dict[str, Any], confirm_large: bool = False) -> StockEvent:
        stock = self.repo.load_stock()
        idx = next((i for i, e in enumerate(stock) if e.id == entry_id), None)
        if idx is None:
            raise NotFoundError("Stock entry not found.")

        entry = self._build(form, entry_id, confirm_large)
        if find_duplicate(stock, entry.product_name, entry.date, exclude_id=entry_id):
            raise DuplicateEntryError("A stock entry for this product and date already exists.")

        updated = list(stock)
        updated[idx] = entry
        self.repo.save_stock(updated)
        log.info("stock_updated id=%s product=%s qty=%s", entry.id, entry.product_name, entry.quantity)
        return entry

    def delete_entry(self, entry_id: str) -> StockEvent:
        stock = self.repo.load_stock()
        target = next((e for e in stock if e.id == entry_id), None)
        if target is None:
            raise NotFoundError("Stock entry not found.")

        self.repo.save_stock([e for e in stock if e.id != entry_id])
        self.undo.push(target)
        log.info("stock_deleted id=%s product=%s", target.id, target.product_name)
        return target

    def undo_delete(self) -> Optional[StockEvent]:
        """Re-append the most recently deleted entry at the end of the log."""
        entry = self.undo.peek()
        if entry is None:
            return None
        stock = self.repo.load_stock()
        if find_duplicate(stock, entry.product_name, entry.date):
            raise DuplicateEntryError("A stock entry for this product and date already exists.")

        self.repo.save_stock(stock + [entry])
        self.undo.pop()
        log.info("stock_restored id=%s product=%s", entry.id, entry.product_name)
        return entry

    def search_entries(
        self,
        product: str = "",
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        sort_key: Optional[str] = None,
        descending: bool = False,
    ) -> list[StockEvent]:
        needle = product.lower()
        rows = [
            e for e in self.repo.load_stock()
            if needle in e.product_name.lower()
            and (not date_from or e.date >= date_from)
            and (not date_to or e.date <= date_to)
        ]
        if sort_key:
            rows.sort(key=lambda e: getattr(e, sort_key), reverse=descending)
        return rows
