from datetime import datetime
from decimal import Decimal
from typing import Dict, Mapping, Tuple

from moneybook.domain import Memo, Transaction


def next_id(last_id: int, now_ms: int) -> int:
    """Time-based id that never repeats or goes backwards within a session."""
    return now_ms if now_ms > last_id else last_id + 1


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def delete_transaction(
    trans: Tuple[Transaction, ...], tid: int
) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tid, trans))


def set_budget(
    budgets: Mapping[str, Decimal], category: str, amount: Decimal
) -> Dict[str, Decimal]:
    return {**budgets, category: amount}


def add_memo(memos: Tuple[Memo, ...], m: Memo) -> Tuple[Memo, ...]:
    # newest first
    return (m,) + memos


def delete_memo(memos: Tuple[Memo, ...], mid: int) -> Tuple[Memo, ...]:
    return tuple(filter(lambda m: m.id != mid, memos))


def recent_transactions(
    trans: Tuple[Transaction, ...], limit: int = 10
) -> Tuple[Transaction, ...]:
    # sorted() is stable, so same-day entries keep insertion order
    ordered = sorted(trans, key=lambda t: t.date, reverse=True)
    return tuple(ordered[: max(0, limit)])


def make_transaction(tid: int, fields: Mapping) -> Transaction:
    return Transaction(
        id=tid,
        type=fields["type"],
        amount=fields["amount"],
        category=fields["category"],
        description=fields.get("description", ""),
        date=fields["date"],
    )


def make_memo(mid: int, fields: Mapping, created_at: datetime) -> Memo:
    return Memo(
        id=mid,
        title=fields["title"],
        content=fields["content"],
        category=fields["category"],
        date=fields["date"],
        created_at=created_at,
    )
