import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from moneybook import transforms
from moneybook.config import Settings
from moneybook.domain import Memo, MemoCategory, StatsSnapshot, Transaction, TxType
from moneybook.events import (
    BUDGET_ALERT,
    BUDGET_SET,
    MEMO_ADDED,
    MEMO_DELETED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    EventBus,
    register_default_handlers,
)
from moneybook.filters import all_of, by_category, is_expense
from moneybook.functional import Either, safe_budget, validate_budget, validate_memo, validate_transaction
from moneybook.insights import analysis_summary
from moneybook.stats import calculate_stats, total_amount

logger = logging.getLogger(__name__)


class FinanceSession:
    """Owns the in-memory state of one user session.

    Transactions and memos are tuples and the budget map a dict; every change
    replaces them with the result of a pure function from ``transforms``.
    Add/set operations return ``Right(value)`` or ``Left(error_dict)``; a
    rejected call leaves the state untouched.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or Settings()
        self.bus = bus if bus is not None else register_default_handlers(EventBus(clock=clock))
        self._clock = clock
        self._last_id = 0
        self.transactions: Tuple[Transaction, ...] = ()
        self.budgets: Dict[str, Decimal] = {}
        self.memos: Tuple[Memo, ...] = ()
        self.alerts: List[dict] = []

    def _new_id(self) -> int:
        now_ms = int(self._clock().timestamp() * 1000)
        self._last_id = transforms.next_id(self._last_id, now_ms)
        return self._last_id

    # transactions

    def add_transaction(
        self,
        tx_type: str | TxType,
        amount,
        category: Optional[str],
        description: str = "",
        tx_date: str | date | None = None,
    ) -> Either[dict, Transaction]:
        result = validate_transaction(
            tx_type,
            amount,
            category,
            description,
            tx_date,
            reject_negative=self.settings.reject_negative,
        )
        if result.is_left():
            return result

        t = transforms.make_transaction(self._new_id(), result.get_or_else({}))
        spent_before = total_amount(filter(all_of(is_expense, by_category(t.category)), self.transactions))
        self.transactions = transforms.add_transaction(self.transactions, t)
        logger.info("Transaction added id=%d type=%s amount=%s category=%s", t.id, t.type.value, t.amount, t.category)

        payload = {
            "id": t.id,
            "type": t.type.value,
            "amount": t.amount,
            "category": t.category,
            "budget": safe_budget(self.budgets, t.category).get_or_else(None),
            "spent_before": spent_before,
        }
        for out in self.bus.publish(TRANSACTION_ADDED, payload):
            if out.get("alert") == BUDGET_ALERT:
                logger.warning("%s", out["message"])
                self.alerts.append({**out, "ts": self._clock().isoformat(timespec="seconds")})
        return result.map(lambda _: t)

    def delete_transaction(self, tid: int) -> bool:
        before = len(self.transactions)
        self.transactions = transforms.delete_transaction(self.transactions, tid)
        removed = len(self.transactions) != before
        if removed:
            self.bus.publish(TRANSACTION_DELETED, {"id": tid})
        else:
            logger.debug("delete_transaction: no transaction with id=%s", tid)
        return removed

    def recent_transactions(self, limit: Optional[int] = None) -> Tuple[Transaction, ...]:
        return transforms.recent_transactions(
            self.transactions, self.settings.recent_limit if limit is None else limit
        )

    # budgets

    def set_budget(self, category: Optional[str], amount) -> Either[dict, tuple]:
        result = validate_budget(category, amount)
        if result.is_right():
            name, value = result.get_or_else(None)
            self.budgets = transforms.set_budget(self.budgets, name, value)
            self.bus.publish(BUDGET_SET, {"category": name, "amount": value})
        return result

    # memos

    def add_memo(
        self,
        title: Optional[str],
        content: Optional[str],
        category: str | MemoCategory = MemoCategory.GENERAL,
        memo_date: str | date | None = None,
    ) -> Either[dict, Memo]:
        result = validate_memo(title, content, category, memo_date).map(
            lambda fields: transforms.make_memo(self._new_id(), fields, self._clock())
        )
        if result.is_right():
            memo = result.get_or_else(None)
            self.memos = transforms.add_memo(self.memos, memo)
            self.bus.publish(MEMO_ADDED, {"id": memo.id, "title": memo.title, "category": memo.category.value})
        return result

    def delete_memo(self, mid: int) -> bool:
        before = len(self.memos)
        self.memos = transforms.delete_memo(self.memos, mid)
        removed = len(self.memos) != before
        if removed:
            self.bus.publish(MEMO_DELETED, {"id": mid})
        else:
            logger.debug("delete_memo: no memo with id=%s", mid)
        return removed

    # derived views

    def stats(self, today: Optional[date] = None) -> StatsSnapshot:
        return calculate_stats(self.transactions, self.budgets, today=today)

    def insights(self, today: Optional[date] = None) -> dict:
        return analysis_summary(self.stats(today), self.transactions, warning_pct=self.settings.warning_pct)

    def clear_alerts(self) -> None:
        self.alerts = []
