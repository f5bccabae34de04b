"""
Analysis History — SQLite-backed Store

Persists scored postings per owner so reviewers can page back through
past analyses, reopen one, or delete it. The scoring engine never
touches this module; the API saves results after scoring.
"""

import json
import math
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional


class AnalysisStore:
    """Owner-scoped analysis records backed by SQLite."""

    def __init__(self, db_path: str = "jobshield_history.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS analyses (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    job_text TEXT NOT NULL,
                    extracted_text TEXT NOT NULL,
                    image_name TEXT,
                    score INTEGER NOT NULL,
                    status TEXT NOT NULL,
                    result TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_created
                ON analyses(owner_id, created_at)
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def save(self, result: dict, metadata: dict) -> dict:
        """
        Store a scored analysis.

        ``result`` is the engine wire dict. ``metadata`` carries
        owner_id, job_text, extracted_text and image_name.

        Returns the stored record (with id and createdAt).
        """
        analysis_id = uuid.uuid4().hex
        created_at = datetime.now(timezone.utc).isoformat()
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    """INSERT INTO analyses
                       (id, owner_id, job_text, extracted_text, image_name,
                        score, status, result, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        analysis_id,
                        metadata.get("owner_id", "anonymous"),
                        metadata.get("job_text", ""),
                        metadata.get("extracted_text", ""),
                        metadata.get("image_name"),
                        int(result["score"]),
                        result["status"],
                        json.dumps(result, default=str),
                        created_at,
                    ),
                )
                conn.commit()
        return self.get(analysis_id, metadata.get("owner_id", "anonymous"))

    def list(self, owner_id: str, page: int = 1, limit: int = 10) -> dict:
        """Newest-first page of an owner's analyses."""
        page = max(1, page)
        limit = max(1, limit)
        with self._get_conn() as conn:
            total = conn.execute(
                "SELECT COUNT(*) FROM analyses WHERE owner_id = ?", (owner_id,),
            ).fetchone()[0]
            rows = conn.execute(
                """SELECT id, owner_id, job_text, extracted_text, image_name,
                          score, status, result, created_at
                   FROM analyses WHERE owner_id = ?
                   ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?""",
                (owner_id, limit, (page - 1) * limit),
            ).fetchall()

        return {
            "analyses": [self._row_to_dict(r) for r in rows],
            "pagination": {
                "total": total,
                "page": page,
                "pages": math.ceil(total / limit),
                "limit": limit,
            },
        }

    def get(self, analysis_id: str, owner_id: str) -> Optional[dict]:
        with self._get_conn() as conn:
            row = conn.execute(
                """SELECT id, owner_id, job_text, extracted_text, image_name,
                          score, status, result, created_at
                   FROM analyses WHERE id = ? AND owner_id = ?""",
                (analysis_id, owner_id),
            ).fetchone()
        return self._row_to_dict(row) if row else None

    def delete(self, analysis_id: str, owner_id: str) -> bool:
        with self._lock:
            with self._get_conn() as conn:
                cur = conn.execute(
                    "DELETE FROM analyses WHERE id = ? AND owner_id = ?",
                    (analysis_id, owner_id),
                )
                conn.commit()
                return cur.rowcount > 0

    def count(self) -> int:
        with self._get_conn() as conn:
            row = conn.execute("SELECT COUNT(*) FROM analyses").fetchone()
            return row[0] if row else 0

    @staticmethod
    def _row_to_dict(r: tuple) -> dict[str, Any]:
        result = json.loads(r[7])
        return {
            "id": r[0],
            "ownerId": r[1],
            "jobText": r[2],
            "extractedImageText": r[3],
            "imageName": r[4],
            "riskScore": r[5],
            "status": r[6],
            "reasons": result.get("reasons", []),
            "aiConfidence": result.get("aiConfidence", 0),
            "hasCriticalFlags": result.get("hasCriticalFlags", False),
            "criticalReason": result.get("criticalReason"),
            "breakdown": result.get("breakdown", {}),
            "createdAt": r[8],
        }


def _get_store() -> AnalysisStore:
    """Factory — reads db path from config."""
    from jobshield.config import settings
    return AnalysisStore(db_path=settings.HISTORY_DB_PATH)
