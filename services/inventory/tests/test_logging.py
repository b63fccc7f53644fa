import json
import logging

from shared.core import set_request_context, clear_request_context
from shared.core.logging_config import StructuredFormatter, SecurityFilter

def _record(msg, **extra):
    record = logging.LogRecord("app.ledger", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record

def test_structured_record_carries_trace_and_fields():
    set_request_context(request_id="req-1", actor_id="user-a")
    try:
        line = StructuredFormatter("inventory-ledger").format(
            _record("Purchase recorded", extra_fields={"item_id": "x"}, duration_ms=1.5)
        )
    finally:
        clear_request_context()

    entry = json.loads(line)
    assert entry["service"] == "inventory-ledger"
    assert entry["message"] == "Purchase recorded"
    assert entry["trace"] == {"request_id": "req-1", "actor_id": "user-a"}
    assert entry["custom"] == {"item_id": "x"}
    assert entry["performance"] == {"duration_ms": 1.5}

def test_no_trace_outside_requests():
    entry = json.loads(StructuredFormatter().format(_record("idle")))
    assert "trace" not in entry

def test_credentials_redacted():
    record = _record("Authorization: Bearer abc.def.ghi password=hunter2")
    SecurityFilter().filter(record)
    message = record.getMessage()
    assert "abc.def.ghi" not in message
    assert "hunter2" not in message
    assert message.count("***REDACTED***") == 2
