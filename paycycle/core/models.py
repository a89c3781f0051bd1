# paycycle/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Tuple

from paycycle.errors import ValidationError
from paycycle.utils import to_decimal, to_utc_datetime, weekday_name


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Decimal
    description: str
    date: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        # Stored transactions always carry their date; "now" is only for new ones
        if data["date"] is None:
            raise ValidationError(f"Stored transaction {data['id']} has no date")
        return cls(
            id=str(data["id"]),
            amount=to_decimal(data["amount"]),
            description=data.get("description") or "",
            date=to_utc_datetime(data["date"]),
        )


@dataclass
class UserRecord:
    user_id: str
    transactions: List[Transaction] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "transactions": [tx.to_dict() for tx in self.transactions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserRecord":
        return cls(
            user_id=str(data["userId"]),
            transactions=[Transaction.from_dict(tx) for tx in data.get("transactions", [])],
        )


@dataclass(frozen=True)
class WeekBucket:
    start: date
    end: date
    amount: Decimal
    total_amount: Decimal
    transactions: Tuple[Transaction, ...]

    @property
    def weekday_start(self) -> str:
        return weekday_name(self.start)

    @property
    def weekday_end(self) -> str:
        return weekday_name(self.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end
