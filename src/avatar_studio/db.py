import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from avatar_studio.config import settings


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _conn() -> sqlite3.Connection:
    Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(settings.database_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    with _conn() as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
              owner_id TEXT PRIMARY KEY,
              credits INTEGER NOT NULL DEFAULT 0,
              credits_used INTEGER NOT NULL DEFAULT 0,
              videos_generated INTEGER NOT NULL DEFAULT 0,
              created_at TEXT NOT NULL,
              last_seen_at TEXT NOT NULL,
              last_video_generated_at TEXT
            )
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS credit_ledger (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              owner_id TEXT NOT NULL,
              type TEXT NOT NULL,
              credits INTEGER NOT NULL,
              video_id TEXT,
              external_ref TEXT,
              note TEXT,
              created_at TEXT NOT NULL
            )
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS videos (
              video_id TEXT PRIMARY KEY,
              owner_id TEXT NOT NULL,
              status TEXT NOT NULL,
              original_url TEXT NOT NULL,
              processed_url TEXT NOT NULL,
              script TEXT NOT NULL,
              avatar_id TEXT NOT NULL,
              voice_id TEXT NOT NULL,
              orientation TEXT NOT NULL,
              width INTEGER NOT NULL,
              height INTEGER NOT NULL,
              template_id TEXT,
              provider_job_id TEXT,
              storage TEXT NOT NULL DEFAULT 'catbox',
              created_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_videos_owner_created ON videos (owner_id, created_at)")
        conn.commit()


def ensure_user(owner_id: str) -> None:
    ts = _now()
    with _conn() as conn:
        conn.execute(
            """
            INSERT INTO users (owner_id, created_at, last_seen_at)
            VALUES (?, ?, ?)
            ON CONFLICT(owner_id) DO UPDATE SET last_seen_at=excluded.last_seen_at
            """,
            (owner_id, ts, ts),
        )
        conn.commit()


def get_user(owner_id: str) -> dict | None:
    with _conn() as conn:
        row = conn.execute("SELECT * FROM users WHERE owner_id=?", (owner_id,)).fetchone()
    return dict(row) if row else None


def list_ledger(owner_id: str, limit: int = 20) -> list[dict]:
    with _conn() as conn:
        rows = conn.execute(
            "SELECT * FROM credit_ledger WHERE owner_id=? ORDER BY id DESC LIMIT ?",
            (owner_id, limit),
        ).fetchall()
    return [dict(r) for r in rows]


def grant_credits(owner_id: str, credits: int, note: str, external_ref: str | None = None) -> None:
    if credits <= 0:
        raise ValueError("credits must be > 0")
    ensure_user(owner_id)
    with _conn() as conn:
        conn.execute(
            "UPDATE users SET credits = credits + ?, last_seen_at=? WHERE owner_id=?",
            (credits, _now(), owner_id),
        )
        conn.execute(
            """
            INSERT INTO credit_ledger (owner_id, type, credits, external_ref, note, created_at)
            VALUES (?, 'grant', ?, ?, ?, ?)
            """,
            (owner_id, credits, external_ref, note, _now()),
        )
        conn.commit()


def _debit(conn: sqlite3.Connection, owner_id: str, credits: int, video_id: str, ts: str) -> None:
    # single UPDATE so concurrent debits never lose an update
    conn.execute(
        """
        UPDATE users
        SET credits = credits - ?,
            credits_used = credits_used + ?,
            videos_generated = videos_generated + 1,
            last_video_generated_at = ?,
            last_seen_at = ?
        WHERE owner_id=?
        """,
        (credits, credits, ts, ts, owner_id),
    )
    conn.execute(
        """
        INSERT INTO credit_ledger (owner_id, type, credits, video_id, note, created_at)
        VALUES (?, 'debit', ?, ?, 'video generated', ?)
        """,
        (owner_id, credits, video_id, ts),
    )


def record_video(
    owner_id: str,
    credits: int,
    original_url: str,
    processed_url: str,
    script: str,
    avatar_id: str,
    voice_id: str,
    orientation: str,
    width: int,
    height: int,
    template_id: str | None = None,
    provider_job_id: str | None = None,
) -> str:
    """Insert the completed video and charge for it in one transaction. Returns the video id."""
    ensure_user(owner_id)
    video_id = uuid4().hex
    ts = _now()
    with _conn() as conn:
        conn.execute(
            """
            INSERT INTO videos (
              video_id, owner_id, status, original_url, processed_url, script, avatar_id, voice_id,
              orientation, width, height, template_id, provider_job_id, created_at
            )
            VALUES (?, ?, 'completed', ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                video_id,
                owner_id,
                original_url,
                processed_url,
                script,
                avatar_id,
                voice_id,
                orientation,
                width,
                height,
                template_id,
                provider_job_id,
                ts,
            ),
        )
        _debit(conn, owner_id, credits, video_id, ts)
        conn.commit()
    return video_id


def get_video(video_id: str) -> dict | None:
    with _conn() as conn:
        row = conn.execute("SELECT * FROM videos WHERE video_id = ?", (video_id,)).fetchone()
    return dict(row) if row else None


def list_videos(owner_id: str, limit: int = 20, offset: int = 0, status: str | None = None) -> list[dict]:
    sql = "SELECT * FROM videos WHERE owner_id = ?"
    params: list = [owner_id]
    if status:
        sql += " AND status = ?"
        params.append(status)
    sql += " ORDER BY created_at DESC LIMIT ? OFFSET ?"
    params.extend([limit, offset])
    with _conn() as conn:
        rows = conn.execute(sql, tuple(params)).fetchall()
    return [dict(r) for r in rows]


def count_videos_since(owner_id: str, since: str) -> int:
    with _conn() as conn:
        row = conn.execute(
            "SELECT COUNT(*) c FROM videos WHERE owner_id = ? AND created_at >= ?",
            (owner_id, since),
        ).fetchone()
    return int(row["c"])


def delete_video(video_id: str) -> None:
    with _conn() as conn:
        conn.execute("DELETE FROM videos WHERE video_id = ?", (video_id,))
        conn.commit()


def get_video_stats() -> dict:
    with _conn() as conn:
        total = conn.execute("SELECT COUNT(*) c FROM videos").fetchone()["c"]
        owners = conn.execute("SELECT COUNT(DISTINCT owner_id) c FROM videos").fetchone()["c"]
        credits_row = conn.execute("SELECT COALESCE(SUM(credits), 0) s FROM credit_ledger WHERE type='debit'").fetchone()
        by_orientation = conn.execute("SELECT orientation, COUNT(*) c FROM videos GROUP BY orientation").fetchall()

    return {
        "video_count": total,
        "owner_count": owners,
        "credits_spent": int(credits_row["s"]),
        "by_orientation": {r["orientation"]: r["c"] for r in by_orientation},
    }
