from __future__ import annotations

from collections import defaultdict

from stockbook.domain.models import (
    BestSeller,
    DailyBucket,
    DashboardMetrics,
    Kpis,
    MonthlyBucket,
    SaleEvent,
    StockEvent,
)
from stockbook.repositories.event_store import EventStore

BEST_SELLER_COLORS = ("#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#aa46be")
BEST_SELLER_LIMIT = 5


def _bucketed(stock: list[StockEvent], sales: list[SaleEvent], key) -> list[tuple[str, float, float]]:
    buckets: dict[str, list[float]] = defaultdict(lambda: [0.0, 0.0])
    for e in stock:
        buckets[key(e.date)][0] += e.total_price
    for e in sales:
        buckets[key(e.date)][1] += e.total_price
    # zero-padded ISO dates sort correctly as plain strings
    return [(k, v[0], v[1]) for k, v in sorted(buckets.items())]


def daily_series(stock: list[StockEvent], sales: list[SaleEvent]) -> list[DailyBucket]:
    return [DailyBucket(date=d, stock=s, sales=v) for d, s, v in _bucketed(stock, sales, lambda d: d)]


def monthly_summary(stock: list[StockEvent], sales: list[SaleEvent]) -> list[MonthlyBucket]:
    return [MonthlyBucket(month=m, stock=s, sales=v) for m, s, v in _bucketed(stock, sales, lambda d: d[:7])]


def best_sellers(sales: list[SaleEvent], limit: int = BEST_SELLER_LIMIT) -> list[BestSeller]:
    qty: dict[str, float] = defaultdict(float)
    for e in sales:
        qty[e.product_name] += e.quantity
    ranked = sorted(qty.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return [
        BestSeller(name=name, quantity=q, fill=BEST_SELLER_COLORS[i % len(BEST_SELLER_COLORS)])
        for i, (name, q) in enumerate(ranked)
    ]


def kpis(stock: list[StockEvent], sales: list[SaleEvent]) -> Kpis:
    total_sales = sum(e.total_price for e in sales)
    total_stock = sum(e.total_price for e in stock)
    return Kpis(total_sales=total_sales, total_stock=total_stock, profit=total_sales - total_stock)


def dashboard_metrics(stock: list[StockEvent], sales: list[SaleEvent]) -> DashboardMetrics:
    left: dict[str, float] = defaultdict(float)
    for e in stock:
        left[e.product_name] += e.quantity
    for e in sales:
        # only subtracted while the running balance is non-zero
        if left.get(e.product_name):
            left[e.product_name] -= e.quantity

    totals = kpis(stock, sales)
    return DashboardMetrics(
        total_stock_value=totals.total_stock,
        total_sales_value=totals.total_sales,
        total_quantity=sum(e.quantity for e in stock),
        stock_left_quantity=sum(left.values()),
        distinct_products=len({e.product_name for e in stock}),
        profit=totals.profit,
    )


class AnalyticsService:
    def __init__(self, repo: EventStore):
        self.repo = repo

    def snapshot(self) -> dict:
        stock = self.repo.load_stock()
        sales = self.repo.load_sales()
        return {
            "kpis": kpis(stock, sales).to_dict(),
            "daily": [b.to_dict() for b in daily_series(stock, sales)],
            "monthly": [b.to_dict() for b in monthly_summary(stock, sales)],
            "bestSellers": [b.to_dict() for b in best_sellers(sales)],
        }

    def dashboard(self) -> DashboardMetrics:
        return dashboard_metrics(self.repo.load_stock(), self.repo.load_sales())
