from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stockbook.domain.numbers import DataQualityLog
from stockbook.repositories.event_store import EventStore
from stockbook.repositories.sqlite_store import SqliteKeyValueStore
from stockbook.services.analytics_service import AnalyticsService
from stockbook.services.catalog_service import CatalogService
from stockbook.services.inventory_service import InventoryService
from stockbook.services.reporting_service import ReportingService
from stockbook.services.sales_service import SalesService
from stockbook.services.settings_service import SettingsService
from stockbook.services.stock_service import StockService


@dataclass(frozen=True)
class AppContainer:
    store: SqliteKeyValueStore
    events: EventStore
    quality: DataQualityLog
    stock: StockService
    sales: SalesService
    inventory: InventoryService
    analytics: AnalyticsService
    reporting: ReportingService
    catalog: CatalogService
    settings: SettingsService


def build_container(db_path: Path | str, undo_capacity: int = 1) -> AppContainer:
    store = SqliteKeyValueStore(db_path)
    store.init_db()

    quality = DataQualityLog()
    events = EventStore(store, quality)

    return AppContainer(
        store=store,
        events=events,
        quality=quality,
        stock=StockService(events, undo_capacity=undo_capacity),
        sales=SalesService(events, undo_capacity=undo_capacity),
        inventory=InventoryService(events),
        analytics=AnalyticsService(events),
        reporting=ReportingService(events),
        catalog=CatalogService(events),
        settings=SettingsService(events),
    )
