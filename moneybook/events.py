import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'EventBus', 'Event', 'TRANSACTION_ADDED', 'TRANSACTION_DELETED', 'BUDGET_SET',
    'MEMO_ADDED', 'MEMO_DELETED', 'BUDGET_ALERT', 'check_budget_handler',
    'log_event_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._subscribers: Dict[str, List[Handler]] = {}
        self._clock = clock

    def subscribe(self, name: str, handler: Handler) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=self._clock().isoformat(),
            payload=payload
        )

        results = []
        for handler in self._subscribers[name]:
            result = handler(event, payload)
            results.append(result)
        return results

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
BUDGET_SET = "BUDGET_SET"
MEMO_ADDED = "MEMO_ADDED"
MEMO_DELETED = "MEMO_DELETED"
BUDGET_ALERT = "BUDGET_ALERT"


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Flag an expense that takes its category past the budget.

    Expects ``type``, ``amount``, ``category``, ``budget`` (``None`` when the
    category has no budget) and ``spent_before``.
    """
    if payload.get("type") != "expense":
        return {}
    budget = payload.get("budget")
    if budget is None or budget <= 0:
        return {}

    spent_before = payload.get("spent_before", Decimal("0"))
    spent = spent_before + payload.get("amount", Decimal("0"))
    if spent > budget >= spent_before:
        return {
            "alert": BUDGET_ALERT,
            "message": f"Budget exceeded for {payload['category']}: {spent} / {budget}",
            "category": payload["category"],
            "spent": spent,
            "budget": budget,
        }
    return {"spent": spent}


def log_event_handler(event: Event, payload: dict) -> dict:
    logger.info("Event %s payload=%s", event.name, payload)
    return {}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(TRANSACTION_ADDED, check_budget_handler)
    for name in (TRANSACTION_ADDED, TRANSACTION_DELETED, BUDGET_SET, MEMO_ADDED, MEMO_DELETED):
        bus.subscribe(name, log_event_handler)
    return bus
