"""Database schema DDL and initialization.

Tables:
  - expenses: individual expense records, one row per expense
"""

from __future__ import annotations
import sqlite3
from typing import Sequence

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

# AUTOINCREMENT keeps deleted ids from being handed out again.
EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    expense_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    amount TEXT NOT NULL, -- decimal string, two fractional digits
    type_id TEXT NOT NULL,
    category TEXT NOT NULL,
    date TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}) -- ISO UTC timestamp
);
"""

DDL_ORDER: Sequence[str] = (EXPENSES_DDL,)


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables idempotently on an open connection."""
    cur = conn.cursor()
    for ddl in DDL_ORDER:
        cur.execute(ddl)
    conn.commit()
