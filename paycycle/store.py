# paycycle/store.py
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from paycycle.core.models import Transaction, UserRecord, WeekBucket
from paycycle.errors import PersistenceError, ValidationError
from paycycle.report import build_report
from paycycle.storage import get_storage
from paycycle.storage.base import BaseStorage
from paycycle.utils import to_decimal, to_utc_datetime

logger = logging.getLogger(__name__)


def normalize_id(value) -> str:
    """User and transaction ids are compared as strings; ``None`` becomes the empty id."""
    if value is None:
        return ""
    return str(value)


class TransactionStore:
    """In-memory per-user transaction records backed by a storage collaborator.

    The store is built once and handed to whoever needs it (the HTTP layer,
    the CLI). Data is read from ``storage`` the first time it is needed;
    later calls reuse the loaded records. Nothing is written back until
    :meth:`persist` (or :meth:`close`) is called, except :meth:`clear_data`,
    which writes the empty collection immediately.

    Alongside the ordered list of :class:`UserRecord` the store keeps an
    index from user id to list position. A record keeps its position for as
    long as the store lives.
    """

    def __init__(self, storage: BaseStorage, include_open_period: bool = False):
        self.storage = storage
        self.include_open_period = include_open_period
        self._records: List[UserRecord] = []
        self._index: Dict[str, int] = {}
        self._loaded = False

    def __enter__(self) -> "TransactionStore":
        self._ensure_loaded()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()

    def load(self) -> List[UserRecord]:
        """(Re)read every record from storage and rebuild the index."""
        raw = self.storage.load()
        try:
            records = [UserRecord.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValidationError) as exc:
            raise PersistenceError(f"Malformed user record in storage: {exc}") from exc

        self._records = records
        self._index = {record.user_id: pos for pos, record in enumerate(records)}
        self._loaded = True
        logger.info("Loaded %d user record(s)", len(records))
        return self._records

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _record_for(self, user_id) -> Optional[UserRecord]:
        key = normalize_id(user_id)
        if not key:
            return None
        self._ensure_loaded()
        pos = self._index.get(key)
        if pos is None:
            return None
        return self._records[pos]

    def get_data(self) -> List[UserRecord]:
        self._ensure_loaded()
        return self._records

    def get_user_index(self) -> Dict[str, int]:
        self._ensure_loaded()
        return dict(self._index)

    def add(self, user_id, amount, description: str = "", date=None) -> Transaction:
        """Record a transaction for ``user_id`` and return it.

        Raises ValidationError when the user id is missing or the amount is
        not a number. The change stays in memory until :meth:`persist`.
        """
        key = normalize_id(user_id)
        if not key:
            raise ValidationError("A transaction must have a user id")

        tx = Transaction(
            id=str(uuid.uuid4()),
            amount=to_decimal(amount),
            description=description or "",
            date=to_utc_datetime(date),
        )

        self._ensure_loaded()
        pos = self._index.get(key)
        if pos is None:
            self._records.append(UserRecord(user_id=key, transactions=[tx]))
            self._index[key] = len(self._records) - 1
        else:
            self._records[pos].transactions.append(tx)
        logger.debug("Added transaction %s for user %s", tx.id, key)
        return tx

    def find(self, user_id, transaction_id) -> Optional[Transaction]:
        """Return the transaction, or None if the user or id is unknown."""
        key = normalize_id(transaction_id)
        if not key:
            return None
        record = self._record_for(user_id)
        if record is None:
            return None
        for tx in record.transactions:
            if tx.id == key:
                return tx
        return None

    def get_by_user_id(self, user_id="") -> List[Transaction]:
        record = self._record_for(user_id)
        if record is None:
            return []
        return sorted(record.transactions, key=lambda tx: tx.date)

    def get_sum_by_user_id(self, user_id="") -> Decimal:
        record = self._record_for(user_id)
        if record is None:
            return Decimal("0")
        return sum((tx.amount for tx in record.transactions), Decimal("0"))

    def get_report_by_user_id(
        self,
        user_id="",
        include_open_period: Optional[bool] = None,
    ) -> List[WeekBucket]:
        if include_open_period is None:
            include_open_period = self.include_open_period
        return build_report(self.get_by_user_id(user_id), include_open_period)

    def clear_data(self) -> List[UserRecord]:
        """Drop every record and write the empty collection right away.

        Memory is only emptied once the write has succeeded.
        """
        self.storage.save([])
        self._records = []
        self._index = {}
        self._loaded = True
        logger.info("Cleared all user records")
        return self._records

    def persist(self) -> List[UserRecord]:
        self._ensure_loaded()
        self.storage.save([record.to_dict() for record in self._records])
        return self._records

    def close(self) -> None:
        if self._loaded:
            self.persist()


def create_store(config: dict) -> TransactionStore:
    """Build a store wired to the storage backend named in ``config``."""
    storage = get_storage(config["storage"], config)
    return TransactionStore(
        storage,
        include_open_period=bool(config.get("report", {}).get("include_open_period", False)),
    )
