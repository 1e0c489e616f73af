import pytest

from conftest import make_events, sale, stock

from stockbook.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from stockbook.services.ledger import available_products, available_quantity, latest_price
from stockbook.services.sales_service import SalesService, validate_sale
from stockbook.services.stock_service import StockService


def _edit_fixture():
    stock_log = [stock("Apple", 14, 2.0, "2024-01-01")]
    sales_log = [sale("Apple", 4, 5.0, "2024-01-02", id="s1")]
    return stock_log, sales_log


def test_available_quantity_is_all_time_balance():
    stock_log = [stock("Apple", 10, 2.0, "2024-01-01"), stock("Apple", 5, 2.0, "2024-03-01")]
    sales_log = [sale("Apple", 3, 4.0, "2023-12-31"), sale("Pear", 1, 4.0, "2024-01-01")]

    assert available_quantity("Apple", stock_log, sales_log) == 12


def test_unknown_product_reports_negated_sales():
    assert available_quantity("Ghost", [], [sale("Ghost", 3, 1.0, "2024-01-01")]) == -3
    assert available_quantity("Ghost", [], []) == 0


def test_latest_price_follows_insertion_order_not_date():
    stock_log = [
        stock("Apple", 10, 5.0, "2024-03-01"),
        stock("Apple", 10, 3.0, "2024-01-01"),
    ]
    assert latest_price("Apple", stock_log) == 3.0
    assert latest_price("Pear", stock_log) is None


def test_available_products_skips_sold_out():
    stock_log = [stock("Apple", 2, 1.0, "2024-01-01"), stock("Pear", 2, 1.0, "2024-01-01")]
    sales_log = [sale("Apple", 2, 1.0, "2024-01-02")]
    assert available_products(stock_log, sales_log) == ["Pear"]


def test_edit_adds_back_replaced_quantity():
    stock_log, sales_log = _edit_fixture()

    ok = validate_sale({"productName": "Apple", "quantity": 13, "price": 5}, stock_log, sales_log, editing_id="s1")
    assert ok.id == "s1"
    assert ok.total_price == 65

    with pytest.raises(InsufficientStockError) as exc:
        validate_sale({"productName": "Apple", "quantity": 15, "price": 5}, stock_log, sales_log, editing_id="s1")
    assert exc.value.available == 14


def test_new_sale_cannot_exceed_available():
    stock_log, sales_log = _edit_fixture()

    with pytest.raises(InsufficientStockError, match="Only 10 units available") as exc:
        validate_sale({"productName": "Apple", "quantity": 11, "price": 5}, stock_log, sales_log)
    assert exc.value.available == 10


def test_edit_to_other_product_does_not_borrow_original_quantity():
    stock_log, sales_log = _edit_fixture()
    stock_log.append(stock("Banana", 2, 1.0, "2024-01-01"))

    with pytest.raises(InsufficientStockError) as exc:
        validate_sale({"productName": "Banana", "quantity": 3, "price": 5}, stock_log, sales_log, editing_id="s1")
    assert exc.value.available == 2


def test_rejects_non_positive_price_and_bad_quantity():
    stock_log, sales_log = _edit_fixture()

    with pytest.raises(ValidationError, match="Price must be > 0"):
        validate_sale({"productName": "Apple", "quantity": 1, "price": 0}, stock_log, sales_log)
    with pytest.raises(ValidationError, match="Quantity must be > 0"):
        validate_sale({"productName": "Apple", "quantity": -1, "price": 3}, stock_log, sales_log)
    with pytest.raises(ValidationError, match="Product is required"):
        validate_sale({"productName": " ", "quantity": 1, "price": 3}, stock_log, sales_log)


def test_editing_unknown_sale_is_not_found():
    stock_log, sales_log = _edit_fixture()
    with pytest.raises(NotFoundError):
        validate_sale({"productName": "Apple", "quantity": 1, "price": 3}, stock_log, sales_log, editing_id="nope")


def test_sales_service_create_update_delete_undo():
    events = make_events()
    StockService(events).add_entry({"productName": "Apple", "quantity": 10, "price": 2, "date": "2024-01-01"})
    sales = SalesService(events)

    first = sales.create_sale({"productName": "Apple", "quantity": 4, "price": 5, "date": "2024-01-02", "customerName": "Ravi"})
    assert first.total_price == 20
    assert sales.available_quantity("Apple") == 6
    assert sales.suggested_price("Apple") == 2

    edited = sales.update_sale(first.id, {"productName": "Apple", "quantity": 10, "price": 5, "date": "2024-01-02"})
    assert edited.id == first.id
    assert sales.available_quantity("Apple") == 0
    assert sales.available_products() == []

    removed = sales.delete_sale(first.id)
    assert sales.list_sales() == []
    assert sales.undo_delete() == removed
    assert sales.undo_delete() is None
    assert [s.id for s in sales.list_sales()] == [first.id]


def test_oversell_leaves_log_untouched():
    events = make_events()
    StockService(events).add_entry({"productName": "Apple", "quantity": 2, "price": 2, "date": "2024-01-01"})
    sales = SalesService(events)

    with pytest.raises(InsufficientStockError):
        sales.create_sale({"productName": "Apple", "quantity": 3, "price": 5, "date": "2024-01-02"})
    assert sales.list_sales() == []


def test_search_sales_matches_product_or_customer():
    events = make_events()
    events.save_sales([
        sale("Turmeric", 1, 5.0, "2024-01-03", customer="Meena"),
        sale("Chili", 1, 5.0, "2024-01-01"),
        sale("Cumin", 1, 5.0, "2024-01-02", customer="Tumi"),
    ])
    sales = SalesService(events)

    found = sales.search_sales("tu")
    assert [s.product_name for s in found] == ["Cumin", "Turmeric"]

    newest_first = sales.search_sales("", sort_key="date", descending=True)
    assert [s.date for s in newest_first] == ["2024-01-03", "2024-01-02", "2024-01-01"]


def test_undo_delete_refuses_when_stock_was_resold():
    events = make_events({"stock_entries": [stock("Apple", 10, 2.0, "2024-01-01").to_dict()]})
    sales = SalesService(events)

    first = sales.create_sale({"productName": "Apple", "quantity": 10, "price": 5, "date": "2024-01-02"})
    sales.delete_sale(first.id)
    sales.create_sale({"productName": "Apple", "quantity": 10, "price": 6, "date": "2024-01-03"})

    with pytest.raises(InsufficientStockError) as err:
        sales.undo_delete()
    assert err.value.available == 0
    assert len(sales.undo) == 1
    assert sales.available_quantity("Apple") == 0
    assert [s.price for s in sales.list_sales()] == [6.0]
