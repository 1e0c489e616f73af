from .models import (
    StockEvent,
    SaleEvent,
    Product,
    AppSettings,
    InventoryRow,
    InventoryTotals,
    DailyBucket,
    MonthlyBucket,
    BestSeller,
    Kpis,
    DashboardMetrics,
    ReportTotals,
)
from .errors import (
    AppError,
    ValidationError,
    DuplicateEntryError,
    ConfirmationRequiredError,
    InsufficientStockError,
    NotFoundError,
    StorageError,
)
from .numbers import DataQualityLog

__all__ = [
    "StockEvent",
    "SaleEvent",
    "Product",
    "AppSettings",
    "InventoryRow",
    "InventoryTotals",
    "DailyBucket",
    "MonthlyBucket",
    "BestSeller",
    "Kpis",
    "DashboardMetrics",
    "ReportTotals",
    "AppError",
    "ValidationError",
    "DuplicateEntryError",
    "ConfirmationRequiredError",
    "InsufficientStockError",
    "NotFoundError",
    "StorageError",
    "DataQualityLog",
]
