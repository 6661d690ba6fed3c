import json


def log_withdrawal(db, request, status, metadata=None):
    db.execute(
        "INSERT INTO withdrawals (trace_id, chat_id, user_id, pool, requested, status, metadata)"
        " VALUES (?, ?, ?, ?, ?, ?, ?)",
        (
            request.trace_id,
            request.chat_id,
            request.user_id,
            request.pool.tag,
            request.count,
            status,
            json.dumps(metadata) if metadata else None,
        )
    )
    db.commit()


def get_recent_withdrawals(db, limit=10):
    cursor = db.execute(
        "SELECT trace_id, pool, requested, status, timestamp FROM withdrawals"
        " ORDER BY id DESC LIMIT ?",
        (limit,)
    )
    rows = cursor.fetchall()
    rows.reverse()
    return rows
