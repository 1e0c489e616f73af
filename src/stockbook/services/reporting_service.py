from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, TypeVar, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from stockbook.domain.models import ReportTotals, SaleEvent, StockEvent
from stockbook.repositories.event_store import EventStore
from stockbook.services.inventory_service import build_inventory, filter_inventory, inventory_totals

Entry = TypeVar("Entry", StockEvent, SaleEvent)


@dataclass(frozen=True)
class Report:
    stock: list[StockEvent]
    sales: list[SaleEvent]
    totals: ReportTotals
    products: list[str]


def filter_entries(
    entries: Iterable[Entry],
    product: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[Entry]:
    """Exact product match and inclusive ISO date bounds; undated entries count as today."""
    today = date.today().isoformat()
    out = []
    for e in entries:
        if product and e.product_name != product:
            continue
        day = e.date or today
        if date_from and day < date_from:
            continue
        if date_to and day > date_to:
            continue
        out.append(e)
    return out


def report_totals(stock: list[StockEvent], sales: list[SaleEvent]) -> ReportTotals:
    stock_total = sum(e.total_price for e in stock)
    sales_total = sum(e.total_price for e in sales)
    return ReportTotals(stock=stock_total, sales=sales_total, profit=sales_total - stock_total)


def _money(cell) -> None:
    cell.number_format = "#,##0.00"


def _bold_row(ws, r: int) -> None:
    for c in ws[r]:
        c.font = Font(bold=True)


def _set_widths(ws, widths: dict[str, int]) -> None:
    for col, w in widths.items():
        ws.column_dimensions[col].width = w


def _add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int) -> None:
    ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
    tab = Table(displayName=name, ref=ref)
    tab.tableStyleInfo = TableStyleInfo(
        name="TableStyleMedium9",
        showRowStripes=True,
        showColumnStripes=False,
    )
    ws.add_table(tab)


def _entries_sheet(wb: Workbook, title: str, table_name: str, entries: list[Union[StockEvent, SaleEvent]]) -> None:
    ws = wb.create_sheet(title)
    ws.append(["Product Name", "Quantity", "Price", "Total Price", "Date"])
    _bold_row(ws, 1)
    for row, e in enumerate(entries, start=2):
        ws.append([e.product_name, e.quantity, e.price, e.total_price, e.date or "Unknown"])
        _money(ws[f"C{row}"])
        _money(ws[f"D{row}"])
    ws.freeze_panes = "A2"
    _set_widths(ws, {"A": 32, "B": 10, "C": 14, "D": 16, "E": 14})
    if ws.max_row >= 2:
        _add_table(ws, table_name, 1, 1, ws.max_row, 5)


class ReportingService:
    def __init__(self, repo: EventStore):
        self.repo = repo

    def build_report(
        self,
        product: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Report:
        all_stock = self.repo.load_stock()
        all_sales = self.repo.load_sales()
        stock = filter_entries(all_stock, product, date_from, date_to)
        sales = filter_entries(all_sales, product, date_from, date_to)
        names = sorted({e.product_name for e in all_stock} | {e.product_name for e in all_sales})
        return Report(stock=stock, sales=sales, totals=report_totals(stock, sales), products=names)

    def export_report_excel(
        self,
        path: str,
        product: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> None:
        report = self.build_report(product, date_from, date_to)
        wb = Workbook()

        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Summary"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Product"
        ws["B3"] = product or "All"
        ws["A4"] = "Window"
        ws["B4"] = f"{date_from or '...'}  ->  {date_to or '...'}"

        rows = [
            ("Stock entries", len(report.stock), "int"),
            ("Sales entries", len(report.sales), "int"),
            ("Stock purchases", report.totals.stock, "money"),
            ("Sales", report.totals.sales, "money"),
            ("Profit (Sales - Stock)", report.totals.profit, "money"),
        ]
        for i, (label, val, kind) in enumerate(rows):
            r = 6 + i
            ws[f"A{r}"] = label
            ws[f"B{r}"] = val
            if kind == "money":
                _money(ws[f"B{r}"])
        _set_widths(ws, {"A": 28, "B": 34})

        _entries_sheet(wb, "Stock Data", "StockData", report.stock)
        _entries_sheet(wb, "Sales Data", "SalesData", report.sales)
        wb.save(path)

    def export_inventory_excel(self, path: str, search: str = "") -> None:
        rows = filter_inventory(build_inventory(self.repo.load_stock(), self.repo.load_sales()), search)
        totals = inventory_totals(rows)

        wb = Workbook()
        ws = wb.active
        ws.title = "Inventory"
        ws.append([
            "Product Name", "Opening Stock", "Sold Quantity", "Remaining Quantity",
            "Avg. Cost Price", "Avg. Selling Price", "Profit Margin",
            "Total Profit", "Stock Value", "Status",
        ])
        _bold_row(ws, 1)

        for r, item in enumerate(rows, start=2):
            ws.append([
                item.product_name, item.opening_stock, item.sold_quantity, item.remaining_stock,
                item.avg_cost_price, item.avg_sell_price, item.profit_margin,
                item.total_profit, item.stock_value, item.status,
            ])
            for col in "EFGHI":
                _money(ws[f"{col}{r}"])

        last = ws.max_row
        ws.freeze_panes = "A2"
        _set_widths(ws, {
            "A": 32, "B": 14, "C": 14, "D": 18, "E": 16,
            "F": 18, "G": 16, "H": 16, "I": 16, "J": 14,
        })
        if last >= 2:
            _add_table(ws, "InventoryValuation", 1, 1, last, 10)

        # totals row stays outside the table range
        total_row = last + 2
        ws[f"A{total_row}"] = "Total"
        ws[f"B{total_row}"] = totals.opening_stock
        ws[f"C{total_row}"] = totals.sold_quantity
        ws[f"D{total_row}"] = totals.remaining_stock
        ws[f"H{total_row}"] = totals.total_profit
        ws[f"I{total_row}"] = totals.stock_value
        _money(ws[f"H{total_row}"])
        _money(ws[f"I{total_row}"])
        _bold_row(ws, total_row)

        wb.save(path)
