from datetime import date
from typing import Callable

from moneybook.domain import Transaction, TxType


def by_type(tx_type: TxType) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def by_category(category: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_date_range(start: date, end: date) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return start <= t.date <= end

    return _filter


def all_of(*preds: Callable[[Transaction], bool]) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


is_expense = by_type(TxType.EXPENSE)
is_income = by_type(TxType.INCOME)
