from datetime import date
from decimal import Decimal
from itertools import islice

from moneybook.domain import Transaction, TxType
from moneybook.insights import (
    OK, OVER, WARNING,
    analysis_summary, budget_status, iter_transactions, lazy_top_categories,
)
from moneybook.stats import calculate_stats

TODAY = date(2025, 3, 15)


def make_sample():
    trans = (
        Transaction(1, TxType.EXPENSE, Decimal("300"), "Food", "Groceries", TODAY),
        Transaction(2, TxType.EXPENSE, Decimal("200"), "Transport", "Bus", TODAY),
        Transaction(3, TxType.INCOME, Decimal("5000"), "Salary", "Salary", TODAY),
        Transaction(4, TxType.EXPENSE, Decimal("700"), "Food", "Restaurant", TODAY),
        Transaction(5, TxType.EXPENSE, Decimal("100"), "Housing", "Fix", TODAY),
        Transaction(6, TxType.EXPENSE, Decimal("50"), "Shopping", "Socks", TODAY),
    )
    return trans


def test_iter_transactions_is_lazy_stop_early():
    trans = make_sample()
    calls = {"n": 0}

    def pred(t: Transaction) -> bool:
        calls["n"] += 1
        return t.type == TxType.EXPENSE

    first_two = list(islice(iter_transactions(trans, pred), 2))

    assert len(first_two) == 2
    assert calls["n"] < len(trans)


def test_lazy_top_categories_order_and_share():
    res = list(lazy_top_categories({"a": Decimal("10"), "b": Decimal("30"), "c": Decimal("60")}, Decimal("100"), 2))
    assert res == [("c", Decimal("60"), 60.0), ("b", Decimal("30"), 30.0)]


def test_lazy_top_categories_zero_total():
    assert list(lazy_top_categories({"a": Decimal("0")}, Decimal("0"), 3)) == [("a", Decimal("0"), 0.0)]


def test_budget_status():
    assert budget_status(50) == OK
    assert budget_status(80) == OK
    assert budget_status(81) == WARNING
    assert budget_status(100) == WARNING
    assert budget_status(101) == OVER
    assert budget_status(60, warning_pct=50) == WARNING


def test_analysis_summary():
    trans = make_sample()
    budgets = {"Food": Decimal("2000"), "Transport": Decimal("220"), "Shopping": Decimal("500")}
    snap = calculate_stats(trans, budgets, today=TODAY)
    info = analysis_summary(snap, trans)

    assert info["total_expense"] == 1350
    assert round(info["savings_rate"], 1) == 73.0
    assert [name for name, _, _ in info["top_categories"]] == ["Food", "Transport", "Housing"]
    assert info["budget_warnings"] == [
        {"category": "Transport", "percentage": 91, "over": False},
    ]
    assert info["has_budgets"] is True
    assert info["average_expense"] == Decimal("270")
    assert info["transaction_count"] == 6
    assert info["most_active_category"] == "Food"


def test_analysis_summary_over_budget():
    trans = make_sample()
    snap = calculate_stats(trans, {"Food": Decimal("500")}, today=TODAY)
    info = analysis_summary(snap, trans)
    assert info["budget_warnings"] == [{"category": "Food", "percentage": 200, "over": True}]


def test_analysis_summary_empty():
    snap = calculate_stats((), {}, today=TODAY)
    info = analysis_summary(snap, ())
    assert info["savings_rate"] == 0.0
    assert info["top_categories"] == []
    assert info["budget_warnings"] == []
    assert info["has_budgets"] is False
    assert info["average_expense"] == 0
    assert info["most_active_category"] is None
