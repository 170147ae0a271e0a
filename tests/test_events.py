from datetime import datetime
from decimal import Decimal

from moneybook.events import (
    Event, EventBus,
    BUDGET_ALERT, BUDGET_SET, MEMO_ADDED, TRANSACTION_ADDED,
    check_budget_handler, log_event_handler, register_default_handlers,
)


def make_event(payload):
    return Event(name=TRANSACTION_ADDED, ts=datetime.now().isoformat(), payload=payload)


def test_event_bus_subscribe_and_publish():
    bus = EventBus()
    collected = []

    def handler(event: Event, payload: dict) -> dict:
        collected.append(payload)
        return {"processed": True}

    bus.subscribe(TRANSACTION_ADDED, handler)
    results = bus.publish(TRANSACTION_ADDED, {"amount": Decimal("50")})

    assert results == [{"processed": True}]
    assert collected[0]["amount"] == 50


def test_multiple_subscribers_called_in_order():
    bus = EventBus()
    bus.subscribe(MEMO_ADDED, lambda e, p: {"handler": 1})
    bus.subscribe(MEMO_ADDED, lambda e, p: {"handler": 2})
    assert bus.publish(MEMO_ADDED, {}) == [{"handler": 1}, {"handler": 2}]


def test_publish_without_subscribers():
    assert EventBus().publish(BUDGET_SET, {"category": "food"}) == []


def test_unsubscribe():
    bus = EventBus()

    def handler(event, payload):
        return {"called": True}

    bus.subscribe(BUDGET_SET, handler)
    bus.unsubscribe(BUDGET_SET, handler)
    bus.unsubscribe(BUDGET_SET, handler)
    bus.unsubscribe("UNKNOWN", handler)
    assert bus.publish(BUDGET_SET, {}) == []


def test_check_budget_handler_alert_on_crossing():
    payload = {
        "type": "expense",
        "amount": Decimal("150"),
        "category": "food",
        "budget": Decimal("300"),
        "spent_before": Decimal("200"),
    }
    result = check_budget_handler(make_event(payload), payload)
    assert result["alert"] == BUDGET_ALERT
    assert result["spent"] == 350
    assert result["budget"] == 300
    assert "food" in result["message"]


def test_check_budget_handler_no_alert():
    base = {"type": "expense", "amount": Decimal("50"), "category": "food", "spent_before": Decimal("0")}

    under = {**base, "budget": Decimal("300")}
    assert check_budget_handler(make_event(under), under) == {"spent": Decimal("50")}

    no_budget = {**base, "budget": None}
    assert check_budget_handler(make_event(no_budget), no_budget) == {}

    zero_budget = {**base, "budget": Decimal("0")}
    assert check_budget_handler(make_event(zero_budget), zero_budget) == {}

    income = {**base, "type": "income", "budget": Decimal("10")}
    assert check_budget_handler(make_event(income), income) == {}


def test_check_budget_handler_already_over():
    payload = {
        "type": "expense",
        "amount": Decimal("10"),
        "category": "food",
        "budget": Decimal("300"),
        "spent_before": Decimal("350"),
    }
    assert "alert" not in check_budget_handler(make_event(payload), payload)


def test_log_event_handler(caplog):
    caplog.set_level("INFO", logger="moneybook.events")
    assert log_event_handler(make_event({"id": 1}), {"id": 1}) == {}
    assert TRANSACTION_ADDED in caplog.text


def test_register_default_handlers():
    bus = register_default_handlers(EventBus())
    payload = {"type": "income", "amount": Decimal("1"), "category": "Salary", "budget": None}
    results = bus.publish(TRANSACTION_ADDED, payload)
    assert len(results) == 2


def test_event_timestamp_uses_clock():
    fixed = datetime(2025, 3, 15, 12, 0, 0)
    bus = EventBus(clock=lambda: fixed)
    bus.subscribe(BUDGET_SET, lambda e, p: {"ts": e.ts})
    assert bus.publish(BUDGET_SET, {}) == [{"ts": "2025-03-15T12:00:00"}]
