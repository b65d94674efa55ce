from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from app.core.config import settings
from app.core.errors import StorageError
from app.schemas.analysis import AnalysisRecord, AtsResult, HistoryItem

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _get_db_path() -> Path:
    return Path(settings.analysis_db_path)


def _ensure_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS analyses (
            id TEXT PRIMARY KEY,
            filename TEXT NOT NULL,
            original_name TEXT NOT NULL,
            resume_text TEXT NOT NULL,
            job_description TEXT NOT NULL,
            ats_score INTEGER NOT NULL,
            result_json TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_analyses_created_at
        ON analyses (created_at)
        """
    )


@contextmanager
def _connect() -> Iterator[sqlite3.Connection]:
    db_path = _get_db_path()
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path, timeout=5)
    except (OSError, sqlite3.Error) as exc:
        raise StorageError(f"Unable to open analysis database: {exc}") from exc

    try:
        _ensure_schema(conn)
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        logger.exception("analysis_store_failed db=%s", db_path)
        raise StorageError(f"Analysis storage failed: {exc}") from exc
    finally:
        conn.close()


def init_db() -> None:
    with _connect():
        pass


def _row_to_record(row: tuple) -> AnalysisRecord:
    result = AtsResult.model_validate_json(row[5])
    return AnalysisRecord(
        id=row[0],
        filename=row[1],
        original_name=row[2],
        resume_text=row[3],
        job_description=row[4],
        created_at=datetime.fromisoformat(row[6]),
        **dict(result),
    )


def save_analysis(
    *,
    filename: str,
    original_name: str,
    resume_text: str,
    job_description: str,
    result: AtsResult,
) -> AnalysisRecord:
    record_id = uuid.uuid4().hex
    created_at = _utc_now()
    result_json = result.model_dump_json()

    with _connect() as conn:
        conn.execute(
            """
            INSERT INTO analyses (
                id, filename, original_name, resume_text, job_description,
                ats_score, result_json, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record_id,
                filename,
                original_name,
                resume_text,
                job_description,
                result.ats_score,
                result_json,
                created_at.isoformat(),
            ),
        )

    logger.info("analysis_saved id=%s ats_score=%s", record_id, result.ats_score)
    return AnalysisRecord(
        id=record_id,
        filename=filename,
        original_name=original_name,
        resume_text=resume_text,
        job_description=job_description,
        created_at=created_at,
        **dict(result),
    )


def list_history(limit: int | None = None) -> list[HistoryItem]:
    size = max(1, int(limit if limit is not None else settings.history_limit))
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT id, original_name, ats_score, created_at
            FROM analyses
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (size,),
        ).fetchall()

    return [
        HistoryItem(
            id=row[0],
            original_name=row[1],
            ats_score=int(row[2]),
            created_at=datetime.fromisoformat(row[3]),
        )
        for row in rows
    ]


def get_analysis(record_id: str) -> AnalysisRecord | None:
    with _connect() as conn:
        row = conn.execute(
            """
            SELECT id, filename, original_name, resume_text, job_description, result_json, created_at
            FROM analyses
            WHERE id = ?
            """,
            (record_id,),
        ).fetchone()

    if not row:
        return None
    return _row_to_record(row)


def clear_analyses() -> None:
    with _connect() as conn:
        conn.execute("DELETE FROM analyses")
