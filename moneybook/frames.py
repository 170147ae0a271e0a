from typing import Iterable

import pandas as pd

from moneybook.domain import StatsSnapshot, Transaction

TRANSACTION_COLUMNS = ["id", "date", "type", "category", "amount", "description"]


def transactions_frame(tx_list: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "id": t.id,
            "date": pd.Timestamp(t.date),
            "type": t.type.value,
            "category": t.category,
            "amount": float(t.amount),
            "description": t.description,
        }
        for t in tx_list
    ]
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)


def category_frame(snapshot: StatsSnapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [{"category": c, "amount": float(a)} for c, a in snapshot.expenses_by_category.items()],
        columns=["category", "amount"],
    )


def trend_frame(snapshot: StatsSnapshot) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"date": pd.Timestamp(d.date), "amount": float(d.amount)} for d in snapshot.daily_trend],
        columns=["date", "amount"],
    )
    df["date"] = pd.to_datetime(df["date"])
    df["label"] = df["date"].dt.strftime("%b %d")
    return df


def budget_frame(snapshot: StatsSnapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "category": c,
                "budget": float(line.budget),
                "spent": float(line.spent),
                "remaining": float(line.remaining),
                "percentage": line.percentage,
            }
            for c, line in snapshot.budget_comparison.items()
        ],
        columns=["category", "budget", "spent", "remaining", "percentage"],
    )


def to_csv(df: pd.DataFrame) -> str:
    out = df.copy()
    if "date" in out.columns:
        out["date"] = pd.to_datetime(out["date"], errors="coerce").dt.strftime("%Y-%m-%d")
    return out.to_csv(index=False)
