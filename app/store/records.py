from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.core.config import settings
from app.schemas.career import ChatTurn

_COUNTERS = {"chat_count", "resume_scan_count"}
_PLANS = {"free", "pro"}


class DuplicateEmailError(Exception):
    pass


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.records_db_path)


def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(_get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                plan TEXT NOT NULL DEFAULT 'free',
                chat_count INTEGER NOT NULL DEFAULT 0,
                resume_scan_count INTEGER NOT NULL DEFAULT 0,
                interest TEXT,
                hobby TEXT,
                education TEXT,
                has_completed_onboarding INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS chat_turns (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                user_id TEXT NOT NULL,
                user_message TEXT NOT NULL,
                ai_response TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resume_analyses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                user_id TEXT NOT NULL,
                resume_text TEXT,
                analysis_json TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_chat_turns_user
            ON chat_turns (user_id, id)
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_resume_analyses_user
            ON resume_analyses (user_id, id)
            """
        )
        conn.commit()


def _user_from_row(row: sqlite3.Row | None) -> dict[str, Any] | None:
    if row is None:
        return None
    user = dict(row)
    user["has_completed_onboarding"] = bool(user.get("has_completed_onboarding"))
    return user


def create_user(*, name: str, email: str) -> dict[str, Any]:
    user_id = uuid.uuid4().hex
    try:
        with _connect() as conn:
            conn.execute(
                """
                INSERT INTO users (id, created_at, name, email)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, _utc_now(), name, email),
            )
            conn.commit()
    except sqlite3.IntegrityError as exc:
        raise DuplicateEmailError(email) from exc
    user = get_user(user_id)
    if user is None:
        raise RuntimeError(f"User '{user_id}' vanished right after insert.")
    return user


def get_user(user_id: str) -> dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _user_from_row(row)


def get_user_by_email(email: str) -> dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
    return _user_from_row(row)


def increment_counter(user_id: str, counter: str) -> None:
    if counter not in _COUNTERS:
        raise ValueError(f"Unknown counter '{counter}'")
    with _connect() as conn:
        conn.execute(
            f"UPDATE users SET {counter} = {counter} + 1 WHERE id = ?",
            (user_id,),
        )
        conn.commit()


def set_plan(user_id: str, plan: str) -> None:
    if plan not in _PLANS:
        raise ValueError(f"Unknown plan '{plan}'")
    with _connect() as conn:
        conn.execute("UPDATE users SET plan = ? WHERE id = ?", (plan, user_id))
        conn.commit()


def save_onboarding(user_id: str, *, interest: str, hobby: str, education: str) -> None:
    with _connect() as conn:
        conn.execute(
            """
            UPDATE users
            SET interest = ?, hobby = ?, education = ?, has_completed_onboarding = 1
            WHERE id = ?
            """,
            (interest, hobby, education, user_id),
        )
        conn.commit()


def add_chat_turn(user_id: str, *, user_message: str, ai_response: str) -> int:
    with _connect() as conn:
        cur = conn.execute(
            """
            INSERT INTO chat_turns (created_at, user_id, user_message, ai_response)
            VALUES (?, ?, ?, ?)
            """,
            (_utc_now(), user_id, user_message, ai_response),
        )
        conn.commit()
        return int(cur.lastrowid)


def recent_chat_turns(user_id: str, limit: int) -> list[ChatTurn]:
    """Last ``limit`` turns for the user, oldest first."""
    if limit <= 0:
        return []
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT user_message, ai_response
            FROM chat_turns
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
    return [
        ChatTurn(user_message=row["user_message"], ai_response=row["ai_response"])
        for row in reversed(rows)
    ]


def chat_history(user_id: str, limit: int) -> list[dict[str, Any]]:
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT id, created_at, user_message, ai_response
            FROM chat_turns
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
    return [dict(row) for row in rows]


def add_resume_analysis(user_id: str, *, resume_text: str, analysis: dict[str, Any]) -> int:
    with _connect() as conn:
        cur = conn.execute(
            """
            INSERT INTO resume_analyses (created_at, user_id, resume_text, analysis_json)
            VALUES (?, ?, ?, ?)
            """,
            (_utc_now(), user_id, resume_text, json.dumps(analysis, ensure_ascii=False)),
        )
        conn.commit()
        return int(cur.lastrowid)


def resume_history(user_id: str, limit: int) -> list[dict[str, Any]]:
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT id, created_at, resume_text, analysis_json
            FROM resume_analyses
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
    history: list[dict[str, Any]] = []
    for row in rows:
        entry = dict(row)
        entry["analysis"] = json.loads(entry.pop("analysis_json") or "{}")
        history.append(entry)
    return history
