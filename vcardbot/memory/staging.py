"""Write-ahead journal for withdrawals.

A withdrawal touches the sheet three times with no transaction around them:
clear the pool column, append what is left, bump the daily report. The row
written here first carries everything needed to finish the job after a crash:

  pending         pool column not rewritten yet, `entries` is the snapshot
  report_pending  pool done, `amount` still owed to the `category` counter
  committed       all done
  aborted         nothing to replay
"""

import json

PENDING = "pending"
REPORT_PENDING = "report_pending"
COMMITTED = "committed"
ABORTED = "aborted"


def stage(db, trace_id, pool_tag, entries, category=None, amount=0, report_date=None):
    cursor = db.execute(
        "INSERT INTO staged_commits (trace_id, pool, entries, category, amount, report_date)"
        " VALUES (?, ?, ?, ?, ?, ?)",
        (trace_id, pool_tag, json.dumps(list(entries)), category, amount, report_date)
    )
    db.commit()
    return cursor.lastrowid


def mark(db, commit_id, status):
    db.execute(
        "UPDATE staged_commits SET status = ? WHERE id = ?",
        (status, commit_id)
    )
    db.commit()


def mark_pool_written(db, commit_id):
    """Pool column done; keep the row open while a report increment is owed."""
    db.execute(
        "UPDATE staged_commits SET status = CASE WHEN amount > 0 THEN ? ELSE ? END WHERE id = ?",
        (REPORT_PENDING, COMMITTED, commit_id)
    )
    db.commit()


def supersede(db, pool_tag, commit_id):
    """A newer snapshot of the pool landed: older pending snapshots must never be replayed."""
    db.execute(
        "UPDATE staged_commits SET status = CASE WHEN amount > 0 THEN ? ELSE ? END"
        " WHERE pool = ? AND status = ? AND id < ?",
        (REPORT_PENDING, ABORTED, pool_tag, PENDING, commit_id)
    )
    db.commit()


def get_pending(db):
    """Pending pool snapshots, oldest first: (id, trace_id, pool_tag, entries)."""
    cursor = db.execute(
        "SELECT id, trace_id, pool, entries FROM staged_commits WHERE status = ? ORDER BY id",
        (PENDING,)
    )
    return [
        (commit_id, trace_id, pool, json.loads(entries))
        for commit_id, trace_id, pool, entries in cursor.fetchall()
    ]


def get_report_pending(db):
    """Owed report increments, oldest first: (id, trace_id, category, amount, report_date)."""
    cursor = db.execute(
        "SELECT id, trace_id, category, amount, report_date FROM staged_commits"
        " WHERE status = ? ORDER BY id",
        (REPORT_PENDING,)
    )
    return cursor.fetchall()


def get_status(db, commit_id):
    row = db.execute(
        "SELECT status FROM staged_commits WHERE id = ?", (commit_id,)
    ).fetchone()
    return row[0] if row else None
