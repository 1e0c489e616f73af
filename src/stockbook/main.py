from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from stockbook.application.container import build_container
from stockbook.config import get_app_paths
from stockbook.domain.errors import AppError
from stockbook.logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="stockbook", description="Inventory valuation and sales analytics.")
    parser.add_argument("--db", default=None, help="Database file. Default: application data directory.")
    sub = parser.add_subparsers(dest="command", required=True)

    inv = sub.add_parser("inventory", help="Per-product valuation, sorted by total profit.")
    inv.add_argument("--search", default="", help="Case-insensitive product name filter.")

    sub.add_parser("analytics", help="KPIs, daily and monthly series, best sellers.")
    sub.add_parser("dashboard", help="Headline dashboard metrics.")

    for name, text in (("report", "Filtered stock/sales report."), ("export-report", "Write the report to Excel.")):
        p = sub.add_parser(name, help=text)
        p.add_argument("--product", default=None)
        p.add_argument("--from", dest="date_from", default=None, help="YYYY-MM-DD, inclusive.")
        p.add_argument("--to", dest="date_to", default=None, help="YYYY-MM-DD, inclusive.")
        if name == "export-report":
            p.add_argument("--out", default=None, help="Target .xlsx path.")

    add_stock = sub.add_parser("add-stock", help="Record a stock purchase.")
    add_sale = sub.add_parser("add-sale", help="Record a sale.")
    for p in (add_stock, add_sale):
        p.add_argument("--product", required=True)
        p.add_argument("--qty", required=True)
        p.add_argument("--price", required=True)
        p.add_argument("--date", default=None, help="YYYY-MM-DD. Default: today.")
    add_stock.add_argument("--confirm", action="store_true", help="Accept quantity or price above 1000.")
    add_sale.add_argument("--customer", default=None)

    exp = sub.add_parser("export-inventory", help="Write the inventory valuation to Excel.")
    exp.add_argument("--search", default="")
    exp.add_argument("--out", default=None, help="Target .xlsx path.")
    return parser.parse_args(argv)


def _dump(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv=None) -> int:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)
    args = parse_args(argv)

    today = date.today().isoformat()

    try:
        app = build_container(args.db or paths.db_path)
        if args.command == "inventory":
            rows, totals = app.inventory.inventory_view(args.search)
            _dump({"rows": [r.to_dict() for r in rows], "totals": totals.to_dict()})
        elif args.command == "analytics":
            _dump(app.analytics.snapshot())
        elif args.command == "dashboard":
            _dump(app.analytics.dashboard().to_dict())
        elif args.command == "report":
            report = app.reporting.build_report(args.product, args.date_from, args.date_to)
            _dump({
                "stock": [e.to_dict() for e in report.stock],
                "sales": [e.to_dict() for e in report.sales],
                "totals": report.totals.to_dict(),
                "products": report.products,
            })
        elif args.command == "export-report":
            out = args.out or str(paths.exports_dir / f"Inventory_Report_{today}.xlsx")
            app.reporting.export_report_excel(out, args.product, args.date_from, args.date_to)
            print(out)
        elif args.command == "add-stock":
            entry = app.stock.add_entry(
                {"productName": args.product, "quantity": args.qty, "price": args.price, "date": args.date},
                confirm_large=args.confirm,
            )
            _dump(entry.to_dict())
        elif args.command == "add-sale":
            sale = app.sales.create_sale({
                "productName": args.product,
                "quantity": args.qty,
                "price": args.price,
                "date": args.date,
                "customerName": args.customer,
            })
            _dump(sale.to_dict())
        elif args.command == "export-inventory":
            out = args.out or str(paths.exports_dir / f"InventoryReport_{today}.xlsx")
            app.reporting.export_inventory_excel(out, args.search)
            print(out)
    except (AppError, OSError) as exc:
        logging.getLogger(__name__).exception("command_failed command=%s", args.command)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if app.quality.total:
        print(f"Warning: {app.quality.total} non-numeric values were counted as 0.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
