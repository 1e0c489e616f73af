from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Optional

from stockbook.domain.numbers import DataQualityLog, parse_price_or_zero, parse_quantity_or_zero, parse_number_or_zero

UNKNOWN_PRODUCT = "Unknown"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def new_event_id() -> str:
    return uuid.uuid4().hex


class CamelDictMixin:
    def to_dict(self) -> dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


def _product_name(raw: dict, quality: DataQualityLog | None) -> str:
    name = raw.get("productName")
    if name is None or str(name) == "":
        if quality is not None:
            quality.record("productName", name)
        return UNKNOWN_PRODUCT
    return str(name)


@dataclass(frozen=True)
class StockEvent(CamelDictMixin):
    id: str
    product_name: str
    quantity: float
    price: float
    date: str
    total_price: float

    @classmethod
    def create(cls, product_name: str, quantity: float, price: float, date: str, id: str | None = None) -> "StockEvent":
        return cls(
            id=id or new_event_id(),
            product_name=product_name,
            quantity=quantity,
            price=price,
            date=date,
            total_price=quantity * price,
        )

    @classmethod
    def from_dict(cls, raw: dict, quality: DataQualityLog | None = None) -> "StockEvent":
        return cls(
            id=str(raw.get("id") or ""),
            product_name=_product_name(raw, quality),
            quantity=parse_quantity_or_zero(raw.get("quantity"), quality),
            price=parse_price_or_zero(raw.get("price"), quality),
            date=str(raw.get("date") or ""),
            total_price=parse_number_or_zero(raw.get("totalPrice"), "totalPrice", quality),
        )


@dataclass(frozen=True)
class SaleEvent(CamelDictMixin):
    id: str
    product_name: str
    quantity: float
    price: float
    date: str
    total_price: float
    customer_name: Optional[str] = None

    @classmethod
    def create(
        cls,
        product_name: str,
        quantity: float,
        price: float,
        date: str,
        customer_name: Optional[str] = None,
        id: str | None = None,
    ) -> "SaleEvent":
        return cls(
            id=id or new_event_id(),
            product_name=product_name,
            quantity=quantity,
            price=price,
            date=date,
            total_price=quantity * price,
            customer_name=customer_name or None,
        )

    @classmethod
    def from_dict(cls, raw: dict, quality: DataQualityLog | None = None) -> "SaleEvent":
        customer = raw.get("customerName")
        return cls(
            id=str(raw.get("id") or ""),
            product_name=_product_name(raw, quality),
            quantity=parse_quantity_or_zero(raw.get("quantity"), quality),
            price=parse_price_or_zero(raw.get("price"), quality),
            date=str(raw.get("date") or ""),
            total_price=parse_number_or_zero(raw.get("totalPrice"), "totalPrice", quality),
            customer_name=str(customer) if customer else None,
        )


@dataclass(frozen=True)
class Product(CamelDictMixin):
    name: str
    category: str
    unit: str

    @classmethod
    def from_dict(cls, raw: dict) -> "Product":
        return cls(
            name=str(raw.get("name") or ""),
            category=str(raw.get("category") or ""),
            unit=str(raw.get("unit") or ""),
        )


def _default_admin_access() -> dict[str, bool]:
    return {"reports": True, "analytics": True, "productManagement": True}


@dataclass(frozen=True)
class AppSettings(CamelDictMixin):
    currency: str = "₹ INR"
    default_unit: str = "kg"
    admin_access: dict[str, bool] = field(default_factory=_default_admin_access)

    @classmethod
    def from_dict(cls, raw: dict | None) -> "AppSettings":
        defaults = cls()
        if not raw:
            return defaults
        return cls(
            currency=raw.get("currency") or defaults.currency,
            default_unit=raw.get("defaultUnit") or defaults.default_unit,
            admin_access=dict(raw.get("adminAccess") or defaults.admin_access),
        )


# ---------- Derived views ----------

@dataclass(frozen=True)
class InventoryRow(CamelDictMixin):
    product_name: str
    opening_stock: float
    sold_quantity: float
    remaining_stock: float
    total_cost: float
    avg_cost_price: float
    total_sell: float
    avg_sell_price: float
    profit_margin: float
    total_profit: float
    stock_value: float
    status: str


@dataclass(frozen=True)
class InventoryTotals(CamelDictMixin):
    opening_stock: float = 0.0
    sold_quantity: float = 0.0
    remaining_stock: float = 0.0
    total_profit: float = 0.0
    stock_value: float = 0.0


@dataclass(frozen=True)
class DailyBucket(CamelDictMixin):
    date: str
    stock: float
    sales: float


@dataclass(frozen=True)
class MonthlyBucket(CamelDictMixin):
    month: str
    stock: float
    sales: float


@dataclass(frozen=True)
class BestSeller(CamelDictMixin):
    name: str
    quantity: float
    fill: str


@dataclass(frozen=True)
class Kpis(CamelDictMixin):
    total_sales: float
    total_stock: float
    profit: float


@dataclass(frozen=True)
class DashboardMetrics(CamelDictMixin):
    total_stock_value: float
    total_sales_value: float
    total_quantity: float
    stock_left_quantity: float
    distinct_products: int
    profit: float


@dataclass(frozen=True)
class ReportTotals(CamelDictMixin):
    stock: float
    sales: float
    profit: float
