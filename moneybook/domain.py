from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple


class TxType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class MemoCategory(str, Enum):
    GENERAL = "general"
    EXPENSE = "expense"
    INCOME = "income"
    BUDGET = "budget"
    GOAL = "goal"
    INSIGHT = "insight"


@dataclass(frozen=True)
class Transaction:
    id: int
    type: TxType
    amount: Decimal      # always stored as entered, sign is not flipped
    category: str
    description: str
    date: date


@dataclass(frozen=True)
class Memo:
    id: int
    title: str
    content: str
    category: MemoCategory
    date: date
    created_at: datetime


# One row of the budget-vs-actual comparison
@dataclass(frozen=True)
class BudgetLine:
    spent: Decimal
    budget: Decimal
    remaining: Decimal
    percentage: int
    zero_budget: bool = False  # percentage is 0 and meaningless


@dataclass(frozen=True)
class DailyAmount:
    date: date
    amount: Decimal


@dataclass(frozen=True)
class StatsSnapshot:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    expenses_by_category: Dict[str, Decimal] = field(default_factory=dict)
    budget_comparison: Dict[str, BudgetLine] = field(default_factory=dict)
    daily_trend: Tuple[DailyAmount, ...] = ()


EXPENSE_CATEGORIES = (
    "Food",
    "Transport",
    "Shopping",
    "Medical",
    "Culture",
    "Education",
    "Housing",
    "Other",
)

INCOME_CATEGORIES = ("Salary", "Side job", "Investment", "Other income")

MEMO_CATEGORY_LABELS = {
    MemoCategory.GENERAL: "General",
    MemoCategory.EXPENSE: "Expense analysis",
    MemoCategory.INCOME: "Income analysis",
    MemoCategory.BUDGET: "Budget analysis",
    MemoCategory.GOAL: "Goal",
    MemoCategory.INSIGHT: "Insight",
}
