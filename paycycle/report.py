# paycycle/report.py
from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Sequence

from paycycle.core.models import Transaction, WeekBucket
from paycycle.utils import pay_period_window


def _open_bucket(tx: Transaction, total_amount: Decimal) -> WeekBucket:
    start, end = pay_period_window(tx.date.date())
    return WeekBucket(
        start=start,
        end=end,
        amount=tx.amount,
        total_amount=total_amount,
        transactions=(tx,),
    )


def _extend_bucket(bucket: WeekBucket, tx: Transaction) -> WeekBucket:
    return WeekBucket(
        start=bucket.start,
        end=bucket.end,
        amount=bucket.amount + tx.amount,
        total_amount=bucket.total_amount,
        transactions=bucket.transactions + (tx,),
    )


def build_report(
    transactions: Sequence[Transaction],
    include_open_period: bool = False,
) -> List[WeekBucket]:
    """Partition date-sorted transactions into pay-period weeks.

    Parameters
    ----------
    transactions:
        Transactions sorted ascending by date.
    include_open_period:
        A bucket is only reported once a later transaction falls outside
        its window, so the most recent period is left out by default. Pass
        ``True`` to also report that last, still-open bucket.
    """
    if not transactions:
        return []

    report: List[WeekBucket] = []
    current = _open_bucket(transactions[0], Decimal("0"))
    for tx in transactions[1:]:
        if current.contains(tx.date.date()):
            current = _extend_bucket(current, tx)
            continue
        report.append(current)
        current = _open_bucket(tx, current.total_amount + current.amount)

    if include_open_period:
        report.append(current)
    return report


def format_report(buckets: Sequence[WeekBucket]) -> List[Dict[str, object]]:
    """Shape report buckets for JSON transport."""
    return [
        {
            "weekStart": f"{bucket.start.isoformat()} {bucket.weekday_start}",
            "weekEnd": f"{bucket.end.isoformat()} {bucket.weekday_end}",
            "quantity": len(bucket.transactions),
            "amount": float(bucket.amount),
            "totalAmount": float(bucket.total_amount),
        }
        for bucket in buckets
    ]
