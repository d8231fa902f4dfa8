#!/usr/bin/env python3
"""
Create a small SQLite database for trying out schemacrud.

The schema has an auto-increment table with created/updated timestamp
columns and a table without a primary key (addressed through rowid).

    python samples/create_sample_db.py
    schemacrud describe --db samples/sample.db --config samples/schemacrud.yaml
"""

import sqlite3
from pathlib import Path

# Output directory
OUTPUT_DIR = Path(__file__).parent

SCHEMA = """
CREATE TABLE IF NOT EXISTS customers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS accounts (
    account_id INTEGER PRIMARY KEY,
    customer_id INTEGER NOT NULL REFERENCES customers(id),
    balance REAL NOT NULL DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS audit_log (
    message TEXT NOT NULL,
    level TEXT NOT NULL DEFAULT 'INFO'
);
"""

CUSTOMERS = [
    ("Ann Lee", "ann@example.com"),
    ("Bo Chen", "bo@example.com"),
    ("Cy Diaz", None),
]


def create_sample_db(path: Path) -> None:
    """Create the schema and load a few rows."""
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SCHEMA)
        conn.executemany(
            "INSERT INTO customers (name, email, created_at, updated_at) "
            "VALUES (?, ?, datetime('now'), datetime('now'))",
            CUSTOMERS,
        )
        conn.executemany(
            "INSERT INTO accounts (customer_id, balance) VALUES (?, ?)",
            [(1, 120.5), (1, 3000.0), (2, 15.25)],
        )
        conn.execute("INSERT INTO audit_log (message) VALUES ('sample database created')")
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    db_path = OUTPUT_DIR / "sample.db"
    create_sample_db(db_path)
    print(f"Sample database written to {db_path}")
