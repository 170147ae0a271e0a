from decimal import Decimal
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Tuple

from moneybook.domain import StatsSnapshot, Transaction
from moneybook.filters import is_expense
from moneybook.stats import ZERO

OK = "ok"
WARNING = "warning"
OVER = "over"


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def lazy_top_categories(
    by_category: Mapping[str, Decimal], total: Decimal, k: int
) -> Iterator[Tuple[str, Decimal, float]]:
    """Yield (category, amount, share of total in %) by amount, largest first."""
    ordered: List[Tuple[str, Decimal]] = sorted(
        by_category.items(), key=lambda item: item[1], reverse=True
    )
    for name, amount in ordered[: max(0, k)]:
        share = float(amount / total * 100) if total else 0.0
        yield name, amount, share


def budget_status(percentage: int, warning_pct: int = 80) -> str:
    if percentage > 100:
        return OVER
    if percentage > warning_pct:
        return WARNING
    return OK


def savings_rate(snapshot: StatsSnapshot) -> float:
    if not snapshot.total_income:
        return 0.0
    return float(snapshot.balance / snapshot.total_income * 100)


def average_expense(trans: Iterable[Transaction], total_expense: Decimal) -> Decimal:
    count = sum(1 for _ in iter_transactions(trans, is_expense))
    if total_expense <= 0:
        return ZERO
    return total_expense / max(count, 1)


def most_active_category(snapshot: StatsSnapshot) -> Optional[str]:
    return next(iter(snapshot.expenses_by_category), None)


def analysis_summary(
    snapshot: StatsSnapshot,
    trans: Iterable[Transaction],
    warning_pct: int = 80,
    top_k: int = 3,
) -> dict:
    trans = tuple(trans)
    warnings = [
        {
            "category": category,
            "percentage": line.percentage,
            "over": line.percentage > 100,
        }
        for category, line in snapshot.budget_comparison.items()
        if line.percentage > warning_pct
    ]
    return {
        "total_income": snapshot.total_income,
        "total_expense": snapshot.total_expense,
        "savings_rate": savings_rate(snapshot),
        "top_categories": list(
            lazy_top_categories(snapshot.expenses_by_category, snapshot.total_expense, top_k)
        ),
        "budget_warnings": warnings,
        "has_budgets": bool(snapshot.budget_comparison),
        "average_expense": average_expense(trans, snapshot.total_expense),
        "transaction_count": len(trans),
        "most_active_category": most_active_category(snapshot),
    }
