from .inventory_service import InventoryService
from .analytics_service import AnalyticsService
from .stock_service import StockService
from .sales_service import SalesService
from .catalog_service import CatalogService
from .settings_service import SettingsService
from .reporting_service import ReportingService

__all__ = [
    "InventoryService",
    "AnalyticsService",
    "StockService",
    "SalesService",
    "CatalogService",
    "SettingsService",
    "ReportingService",
]
