import os
import sqlite3

# columns added after the first release: (table, column, definition)
_MIGRATIONS = [
    ("staged_commits", "category", "TEXT"),
    ("staged_commits", "amount", "INTEGER NOT NULL DEFAULT 0"),
    ("staged_commits", "report_date", "TEXT"),
]


def init_db(path):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    db = sqlite3.connect(path, check_same_thread=False)
    db.execute("PRAGMA journal_mode=WAL")

    db.executescript("""
        CREATE TABLE IF NOT EXISTS staged_commits (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            trace_id TEXT NOT NULL,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
            pool TEXT NOT NULL,
            entries JSON NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
        );
        CREATE TABLE IF NOT EXISTS withdrawals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            trace_id TEXT NOT NULL,
            timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
            chat_id INTEGER NOT NULL,
            user_id INTEGER NOT NULL,
            pool TEXT NOT NULL,
            requested INTEGER NOT NULL,
            status TEXT NOT NULL,
            metadata JSON
        );
    """)
    for table, column, definition in _MIGRATIONS:
        existing = {row[1] for row in db.execute(f"PRAGMA table_info({table})")}
        if column not in existing:
            db.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")
    db.commit()
    return db
