"""Statistics engine: everything the overview shows is derived here.

All functions are pure. ``calculate_stats`` rebuilds the full snapshot from
the transaction tuple and the budget map every time it is called.
"""
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_FLOOR, Decimal
from functools import lru_cache, reduce
from typing import Dict, Iterable, Mapping, Optional, Tuple

from moneybook.domain import BudgetLine, DailyAmount, StatsSnapshot, Transaction
from moneybook.filters import by_date_range, is_expense, is_income

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DEFAULT_TREND_DAYS = 30


def round_half_up_js(value: Decimal) -> int:
    """Round like JavaScript's Math.round: halves go towards +infinity."""
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def total_amount(trans: Iterable[Transaction]) -> Decimal:
    return reduce(lambda acc, t: acc + t.amount, trans, ZERO)


def expenses_by_category(trans: Iterable[Transaction]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in filter(is_expense, trans):
        totals[t.category] += t.amount
    return dict(totals)


def budget_line(spent: Decimal, budget: Decimal) -> BudgetLine:
    if budget == 0:
        return BudgetLine(
            spent=spent,
            budget=budget,
            remaining=budget - spent,
            percentage=0,
            zero_budget=True,
        )
    return BudgetLine(
        spent=spent,
        budget=budget,
        remaining=budget - spent,
        percentage=round_half_up_js(spent / budget * 100),
    )


def budget_comparison(
    by_category: Mapping[str, Decimal], budgets: Mapping[str, Decimal]
) -> Dict[str, BudgetLine]:
    return {
        category: budget_line(by_category.get(category, ZERO), amount)
        for category, amount in budgets.items()
    }


@lru_cache(maxsize=64)
def daily_trend(
    trans: Tuple[Transaction, ...], today: date, days: int = DEFAULT_TREND_DAYS
) -> Tuple[DailyAmount, ...]:
    if days <= 0:
        return ()
    start = today - timedelta(days=days - 1)
    buckets: Dict[date, Decimal] = {start + timedelta(days=i): ZERO for i in range(days)}

    in_window = by_date_range(start, today)
    for t in trans:
        if is_expense(t) and in_window(t):
            buckets[t.date] += t.amount

    return tuple(DailyAmount(date=d, amount=amount) for d, amount in buckets.items())


def calculate_stats(
    trans: Iterable[Transaction],
    budgets: Mapping[str, Decimal],
    today: Optional[date] = None,
) -> StatsSnapshot:
    trans = tuple(trans)
    today = today or date.today()

    income = total_amount(filter(is_income, trans))
    expense = total_amount(filter(is_expense, trans))
    by_category = expenses_by_category(trans)

    snapshot = StatsSnapshot(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
        expenses_by_category=by_category,
        budget_comparison=budget_comparison(by_category, budgets),
        daily_trend=daily_trend(trans, today),
    )
    logger.debug(
        "Stats recomputed transactions=%d budgets=%d balance=%s",
        len(trans),
        len(budgets),
        snapshot.balance,
    )
    return snapshot
