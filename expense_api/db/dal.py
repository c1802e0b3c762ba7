"""Data Access Layer for expense records.

Responsibilities
----------------
- Own the single long-lived SQLite connection shared by every request.
- Translate validated intents into one relational operation each: list all,
  get by id, insert, partial update by id, delete by id.
- Report absence as ``None`` / zero rows affected; the router decides what a
  missing row means over HTTP.
- Surface driver failures as ``StoreError`` so the boundary handler can turn
  them into a 500.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import logging
import sqlite3
from typing import Any, Dict, Iterator, List, Mapping, Optional

from expense_api.core.errors import StoreError
from .schema import init_db

logger = logging.getLogger("expense_api.db")

EXPENSE_COLUMNS = ("expense_id", "name", "amount", "type_id", "category", "date")
MUTABLE_COLUMNS = ("name", "amount", "type_id", "category")
MAX_EXPENSE_ID = 2**63 - 1  # largest SQLite INTEGER
_SELECT_EXPENSE = f"SELECT {', '.join(EXPENSE_COLUMNS)} FROM expenses"


class Database:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    @classmethod
    def open(cls, db_path: Path | str) -> "Database":
        """Connect to ``db_path`` and make sure the schema exists."""
        try:
            conn = sqlite3.connect(db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open database at {db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        init_db(conn)
        logger.debug("opened database %s", db_path)
        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------------
    # Connection helpers
    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside a transaction committed on success."""
        try:
            with self._conn:
                yield self._conn.cursor()
        except sqlite3.Error as e:
            logger.error("store operation failed: %s", e)
            raise StoreError(str(e)) from e

    # ------------------------------------------------------------------
    # Expense operations
    def list_expenses(self) -> List[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute(f"{_SELECT_EXPENSE} ORDER BY expense_id ASC")
            return [dict(r) for r in cur.fetchall()]

    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute(f"{_SELECT_EXPENSE} WHERE expense_id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def count_expenses(self) -> int:
        with self._cursor() as cur:
            cur.execute("SELECT COUNT(*) FROM expenses")
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def insert_expense(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it, including the store-assigned id and date."""
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO expenses (name, amount, type_id, category)
                VALUES (?, ?, ?, ?)
                """,
                tuple(fields[c] for c in MUTABLE_COLUMNS),
            )
            expense_id = int(cur.lastrowid)
            cur.execute(f"{_SELECT_EXPENSE} WHERE expense_id = ?", (expense_id,))
            return dict(cur.fetchone())

    def update_expense(self, expense_id: int, fields: Mapping[str, Any]) -> int:
        """Overwrite only the columns present in ``fields``; return rows affected."""
        columns = [c for c in MUTABLE_COLUMNS if c in fields]
        unknown = set(fields) - set(MUTABLE_COLUMNS)
        if unknown:
            raise ValueError(f"cannot update columns {sorted(unknown)}")
        if not columns:
            raise ValueError("no columns to update")
        assignments = ", ".join(f"{c} = ?" for c in columns)
        params = [fields[c] for c in columns]
        params.append(expense_id)
        with self._cursor() as cur:
            cur.execute(
                f"UPDATE expenses SET {assignments} WHERE expense_id = ?", params
            )
            return cur.rowcount

    def delete_expense(self, expense_id: int) -> int:
        with self._cursor() as cur:
            cur.execute("DELETE FROM expenses WHERE expense_id = ?", (expense_id,))
            return cur.rowcount
