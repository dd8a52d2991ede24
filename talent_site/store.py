"""SQL for the three site resources.

Every function takes an open connection from `Database.connection()`; the caller owns
the unit of work. Rows come back as plain dicts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from talent_site.errors import ValidationFailed
from talent_site.schema import BOOKING_STATUS_PENDING
from talent_site.util.time import parse_timestamp, utcnow_iso


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def _rows(cur: Any) -> List[Dict[str, Any]]:
    return [dict(r) for r in cur.fetchall()]


def _inserted(cur: Any) -> Dict[str, Any]:
    # Drain the RETURNING cursor so the statement is finished before commit.
    return _rows(cur)[0]


# -----------------------------
# Talents
# -----------------------------


def list_talents(conn: Any) -> List[Dict[str, Any]]:
    return _rows(
        conn.execute(
            """
            SELECT id, name, bio, portfolio_url, created_at
            FROM talents
            ORDER BY created_at DESC, id DESC
            """
        )
    )


def get_talent(conn: Any, talent_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT id, name, bio, portfolio_url, created_at FROM talents WHERE id=?",
        (int(talent_id),),
    ).fetchone()
    return dict(row) if row is not None else None


def create_talent(
    conn: Any,
    *,
    name: str,
    bio: str | None = None,
    portfolio_url: str | None = None,
) -> Dict[str, Any]:
    """Out-of-band talent creation (CLI only; no HTTP route)."""
    if _blank(name):
        raise ValidationFailed("name_required")
    return _inserted(
        conn.execute(
            """
            INSERT INTO talents (name, bio, portfolio_url, created_at)
            VALUES (?,?,?,?)
            RETURNING id, name, bio, portfolio_url, created_at
            """,
            (name, bio, portfolio_url, utcnow_iso()),
        )
    )


# -----------------------------
# Bookings
# -----------------------------


def create_booking(
    conn: Any,
    *,
    client_name: str | None,
    client_email: str | None,
    talent_id: int | None = None,
    meeting_time: str | None = None,
) -> Dict[str, Any]:
    if _blank(client_name) or _blank(client_email):
        raise ValidationFailed("client_name_and_client_email_required")

    try:
        meeting_iso = parse_timestamp(meeting_time)
    except ValueError:
        raise ValidationFailed("invalid_meeting_time")

    if talent_id is not None and get_talent(conn, talent_id) is None:
        raise ValidationFailed("talent_not_found")

    return _inserted(
        conn.execute(
            """
            INSERT INTO bookings (talent_id, client_name, client_email, meeting_time, status, created_at)
            VALUES (?,?,?,?,?,?)
            RETURNING id, talent_id, client_name, client_email, meeting_time, status, created_at
            """,
            (talent_id, client_name, client_email, meeting_iso, BOOKING_STATUS_PENDING, utcnow_iso()),
        )
    )


def list_bookings(conn: Any, *, limit: int = 100) -> List[Dict[str, Any]]:
    return _rows(
        conn.execute(
            """
            SELECT b.id, b.talent_id, t.name AS talent_name, b.client_name, b.client_email,
                   b.meeting_time, b.status, b.created_at
            FROM bookings b
            LEFT JOIN talents t ON t.id = b.talent_id
            ORDER BY b.created_at DESC, b.id DESC
            LIMIT ?
            """,
            (int(limit),),
        )
    )


# -----------------------------
# Questions
# -----------------------------


def create_question(
    conn: Any,
    *,
    message: str | None,
    name: str | None = None,
    email: str | None = None,
) -> Dict[str, Any]:
    if _blank(message):
        raise ValidationFailed("message_required")

    return _inserted(
        conn.execute(
            """
            INSERT INTO questions (name, email, message, created_at)
            VALUES (?,?,?,?)
            RETURNING id, name, email, message, created_at
            """,
            (name, email, message, utcnow_iso()),
        )
    )


def list_questions(conn: Any, *, limit: int = 100) -> List[Dict[str, Any]]:
    return _rows(
        conn.execute(
            """
            SELECT id, name, email, message, created_at
            FROM questions
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (int(limit),),
        )
    )
