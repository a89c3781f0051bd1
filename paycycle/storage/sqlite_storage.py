# paycycle/storage/sqlite_storage.py
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Dict, List

from paycycle.errors import PersistenceError
from paycycle.storage.base import BaseStorage

logger = logging.getLogger(__name__)


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            position INTEGER PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(user_id),
            position INTEGER NOT NULL,
            amount TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL
        )
        """
    )
    conn.commit()


class SqliteStorage(BaseStorage):
    """Store user records in a SQLite database.

    Users keep their position in the ``users`` table and transactions keep
    their insertion order in ``transactions.position``. Amounts are stored as
    text so decimals survive unchanged.
    """

    def __init__(self, config: dict):
        self.db_path = Path(config.get("db_path", "data/transactions.db"))

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        _init_db(conn)
        return conn

    def load(self) -> List[Dict[str, object]]:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Could not open {self.db_path}: {exc}") from exc
        try:
            users = conn.execute(
                "SELECT user_id FROM users ORDER BY position"
            ).fetchall()
            rows = conn.execute(
                """
                SELECT user_id, id, amount, description, date
                FROM transactions
                ORDER BY user_id, position
                """
            ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not read {self.db_path}: {exc}") from exc
        finally:
            conn.close()

        by_user: Dict[str, list] = {user_id: [] for (user_id,) in users}
        for user_id, tx_id, amount, description, tx_date in rows:
            by_user.setdefault(user_id, []).append(
                {
                    "id": tx_id,
                    "amount": amount,
                    "description": description,
                    "date": tx_date,
                }
            )
        return [
            {"userId": user_id, "transactions": txs}
            for user_id, txs in by_user.items()
        ]

    def save(self, records: List[Dict[str, object]]) -> None:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Could not open {self.db_path}: {exc}") from exc
        try:
            with conn:
                conn.execute("DELETE FROM transactions")
                conn.execute("DELETE FROM users")
                conn.executemany(
                    "INSERT INTO users (position, user_id) VALUES (?, ?)",
                    [(pos, rec["userId"]) for pos, rec in enumerate(records)],
                )
                rows = []
                for rec in records:
                    for pos, tx in enumerate(rec["transactions"]):
                        rows.append(
                            (
                                tx["id"],
                                rec["userId"],
                                pos,
                                str(tx["amount"]),
                                tx.get("description") or "",
                                tx["date"],
                            )
                        )
                conn.executemany(
                    """
                    INSERT INTO transactions
                    (id, user_id, position, amount, description, date)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not write {self.db_path}: {exc}") from exc
        finally:
            conn.close()
        logger.info("Wrote %d user record(s) to %s", len(records), self.db_path)
