from __future__ import annotations

import logging
from typing import Any, Optional

from stockbook.domain.errors import StorageError
from stockbook.domain.models import AppSettings, Product, SaleEvent, StockEvent, new_event_id
from stockbook.domain.numbers import DataQualityLog
from stockbook.repositories.contracts import KeyValueStore

log = logging.getLogger(__name__)

STOCK_KEY = "stock_entries"
SALES_KEY = "sales_entries"
PRODUCT_OPTIONS_KEY = "product_options"
PRODUCT_LIST_KEY = "product_list"
SETTINGS_KEY = "app_settings"
SETTINGS_UPDATED_KEY = "settings_updated_time"


class EventStore:
    """Typed access to the persisted collections.

    Reads never raise: a failing or corrupt key is logged and reads as an
    empty collection. Writes raise :class:`StorageError` and leave the
    caller's in-memory data untouched.
    """

    def __init__(self, store: KeyValueStore, quality: DataQualityLog | None = None):
        self.store = store
        self.quality = quality if quality is not None else DataQualityLog()

    def _read(self, key: str) -> Optional[Any]:
        try:
            return self.store.get(key)
        except StorageError:
            log.exception("read_failed key=%s fallback=empty", key)
            return None

    def _read_list(self, key: str) -> list:
        value = self._read(key)
        if value is None:
            return []
        if not isinstance(value, list):
            log.warning("read_unexpected_type key=%s type=%s fallback=empty", key, type(value).__name__)
            return []
        return value

    def _write(self, key: str, value: Any) -> None:
        try:
            self.store.set(key, value)
        except StorageError:
            log.error("write_failed key=%s", key)
            raise

    def _records(self, key: str) -> list[dict]:
        stored = self._read_list(key)
        out = []
        assigned = 0
        for idx, raw in enumerate(stored):
            if not isinstance(raw, dict):
                self.quality.record(f"{key}[{idx}]", raw)
                continue
            if not raw.get("id"):
                raw["id"] = new_event_id()
                assigned += 1
                log.warning("record_without_id key=%s index=%s assigned=%s", key, idx, raw["id"])
            out.append(raw)

        # ids handed out once must survive the next load
        if assigned:
            try:
                self.store.set(key, stored)
            except StorageError:
                log.exception("id_backfill_failed key=%s count=%s", key, assigned)
        return out

    # ---------- Event logs ----------
    def load_stock(self) -> list[StockEvent]:
        return [StockEvent.from_dict(r, self.quality) for r in self._records(STOCK_KEY)]

    def save_stock(self, events: list[StockEvent]) -> None:
        self._write(STOCK_KEY, [e.to_dict() for e in events])

    def load_sales(self) -> list[SaleEvent]:
        return [SaleEvent.from_dict(r, self.quality) for r in self._records(SALES_KEY)]

    def save_sales(self, events: list[SaleEvent]) -> None:
        self._write(SALES_KEY, [e.to_dict() for e in events])

    # ---------- Catalog ----------
    def load_product_options(self) -> list[str]:
        return [str(v) for v in self._read_list(PRODUCT_OPTIONS_KEY) if v]

    def save_product_options(self, names: list[str]) -> None:
        self._write(PRODUCT_OPTIONS_KEY, list(names))

    def load_products(self) -> list[Product]:
        return [Product.from_dict(r) for r in self._read_list(PRODUCT_LIST_KEY) if isinstance(r, dict)]

    def save_products(self, products: list[Product]) -> None:
        self._write(PRODUCT_LIST_KEY, [p.to_dict() for p in products])

    # ---------- Settings ----------
    def load_settings(self) -> AppSettings:
        raw = self._read(SETTINGS_KEY)
        return AppSettings.from_dict(raw if isinstance(raw, dict) else None)

    def load_settings_updated_time(self) -> Optional[str]:
        value = self._read(SETTINGS_UPDATED_KEY)
        return str(value) if value else None

    def save_settings(self, settings: AppSettings, updated_time: str) -> None:
        self._write(SETTINGS_KEY, settings.to_dict())
        self._write(SETTINGS_UPDATED_KEY, updated_time)

    def clear_settings(self) -> None:
        try:
            self.store.delete(SETTINGS_KEY)
            self.store.delete(SETTINGS_UPDATED_KEY)
        except StorageError:
            log.error("write_failed key=%s", SETTINGS_KEY)
            raise
