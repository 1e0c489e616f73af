import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def make_events(initial=None):
    from stockbook.repositories.event_store import EventStore
    from stockbook.repositories.sqlite_store import MemoryKeyValueStore

    return EventStore(MemoryKeyValueStore(initial))


def stock(product, qty, price, day, id=None):
    from stockbook.domain.models import StockEvent

    return StockEvent.create(product, qty, price, day, id=id)


def sale(product, qty, price, day, id=None, customer=None):
    from stockbook.domain.models import SaleEvent

    return SaleEvent.create(product, qty, price, day, customer_name=customer, id=id)
