import json
import logging
import sys

from stockbook.domain.numbers import DataQualityLog
from stockbook.logging_config import EventFormatter


def _record(msg, *args, **attrs):
    record = logging.LogRecord("stockbook.sales", logging.INFO, __file__, 12, msg, args, None)
    record.__dict__.update(attrs)
    return record


def test_formatter_writes_one_json_object():
    line = EventFormatter().format(_record("sale_created id=%s", "s1"))
    payload = json.loads(line)

    assert payload["event"] == "sale_created id=s1"
    assert payload["area"] == "stockbook.sales"
    assert payload["level"] == "info"
    assert payload["at"].endswith(":12")
    assert "traceback" not in payload


def test_formatter_merges_fields_without_overwriting_core_keys():
    record = _record("invalid_number", fields={"field": "quantity", "raw": "'abc'", "level": "nope"})
    payload = json.loads(EventFormatter().format(record))

    assert payload["field"] == "quantity"
    assert payload["raw"] == "'abc'"
    assert payload["level"] == "info"


def test_formatter_includes_traceback():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("stockbook", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
    payload = json.loads(EventFormatter().format(record))
    assert "ValueError: boom" in payload["traceback"]


def test_quality_warning_carries_structured_fields(caplog):
    quality = DataQualityLog()
    with caplog.at_level(logging.WARNING, logger="stockbook.quality"):
        quality.record("price", "n/a")

    [record] = caplog.records
    assert record.fields == {"field": "price", "raw": "'n/a'"}
    assert quality.counts["price"] == 1
