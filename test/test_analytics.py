from conftest import make_events, sale, stock

from stockbook.services.analytics_service import (
    AnalyticsService,
    best_sellers,
    daily_series,
    dashboard_metrics,
    kpis,
    monthly_summary,
)


def test_same_day_stock_entries_share_one_bucket():
    stock_log = [stock("A", 10, 10.0, "2024-01-05"), stock("B", 5, 10.0, "2024-01-05")]

    [bucket] = daily_series(stock_log, [])
    assert bucket.to_dict() == {"date": "2024-01-05", "stock": 150.0, "sales": 0.0}


def test_daily_and_monthly_series_sorted_ascending():
    stock_log = [stock("A", 1, 40.0, "2024-02-01"), stock("A", 1, 10.0, "2024-01-20")]
    sales_log = [sale("A", 1, 30.0, "2024-02-10"), sale("A", 1, 5.0, "2024-01-20")]

    assert [(b.date, b.stock, b.sales) for b in daily_series(stock_log, sales_log)] == [
        ("2024-01-20", 10.0, 5.0),
        ("2024-02-01", 40.0, 0.0),
        ("2024-02-10", 0.0, 30.0),
    ]
    assert [(b.month, b.stock, b.sales) for b in monthly_summary(stock_log, sales_log)] == [
        ("2024-01", 10.0, 5.0),
        ("2024-02", 40.0, 30.0),
    ]


def test_best_sellers_rank_by_quantity():
    sales_log = [sale("A", 30, 1.0, "2024-01-01"), sale("B", 50, 1.0, "2024-01-01"), sale("C", 10, 1.0, "2024-01-01")]

    ranked = best_sellers(sales_log)
    assert [b.name for b in ranked] == ["B", "A", "C"]
    assert ranked[0].fill == "#0088FE"
    assert ranked[2].fill == "#FFBB28"


def test_best_sellers_truncate_to_five():
    sales_log = [sale(f"P{i}", i + 1, 1.0, "2024-01-01") for i in range(8)]

    ranked = best_sellers(sales_log)
    assert len(ranked) == 5
    assert ranked[0].name == "P7"
    assert ranked[-1].fill == "#aa46be"


def test_kpis_are_plain_log_sums():
    stock_log = [stock("A", 2, 50.0, "2024-01-01")]
    sales_log = [sale("A", 1, 70.0, "2024-01-02"), sale("Z", 1, 10.0, "2024-01-02")]

    totals = kpis(stock_log, sales_log)
    assert totals.total_stock == 100.0
    assert totals.total_sales == 80.0
    assert totals.profit == -20.0


def test_dashboard_metrics():
    stock_log = [stock("A", 10, 1.0, "2024-01-01"), stock("B", 3, 1.0, "2024-01-01")]
    sales_log = [sale("A", 4, 2.0, "2024-01-02"), sale("Ghost", 9, 2.0, "2024-01-02")]

    m = dashboard_metrics(stock_log, sales_log)
    assert m.total_quantity == 13
    assert m.stock_left_quantity == 9
    assert m.distinct_products == 2
    assert m.total_sales_value == 26.0
    assert m.profit == 13.0


def test_analytics_service_snapshot_counts_bad_totals_as_zero():
    events = make_events({
        "stock_entries": [
            {"id": "s1", "productName": "A", "quantity": 2, "price": 5, "date": "2024-01-01", "totalPrice": 10},
            {"id": "s2", "productName": "A", "quantity": 1, "price": 5, "date": "2024-01-01", "totalPrice": "n/a"},
        ],
        "sales_entries": [],
    })

    snap = AnalyticsService(events).snapshot()
    assert snap["kpis"] == {"totalSales": 0, "totalStock": 10.0, "profit": -10.0}
    assert snap["daily"] == [{"date": "2024-01-01", "stock": 10.0, "sales": 0.0}]
    assert snap["bestSellers"] == []
    assert events.quality.counts["totalPrice"] == 1
