"""
SQLite setup for the key-value store.

schema.sql holds the two tables (documents and index sets) and is applied
idempotently on every startup; there are no migrations.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import aiosqlite
import structlog

from openinterviewer.core.config import settings
from openinterviewer.persistence.repositories.interview_repo import ALL_INTERVIEWS_KEY
from openinterviewer.persistence.repositories.study_repo import ALL_STUDIES_KEY

log = structlog.get_logger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"

# Index sets whose sizes are reported by the health check
COUNTED_SETS = {"studies": ALL_STUDIES_KEY, "interviews": ALL_INTERVIEWS_KEY}


def _resolve(db_path: Optional[Path]) -> Path:
    return Path(db_path or settings.database_path)


async def init_database(db_path: Optional[Path] = None) -> None:
    """
    Create the database file if needed and apply schema.sql.

    Raises:
        FileNotFoundError: schema.sql is missing from the installed package
    """
    path = _resolve(db_path)
    if not SCHEMA_FILE.exists():
        log.error("schema_file_not_found", path=str(SCHEMA_FILE))
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_FILE}")

    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(path) as db:
        # Readers keep working while a completed interview is written
        await db.execute("PRAGMA journal_mode = WAL")
        await db.executescript(SCHEMA_FILE.read_text())
        await db.commit()

    log.info("database_initialized", path=str(path))


async def check_database_health(db_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Check the store for the health endpoints.

    Never raises: an unreachable or uninitialized database is reported as
    {"status": "unhealthy", "error": ...}.
    """
    path = _resolve(db_path)
    report: Dict[str, Any] = {"status": "healthy", "path": str(path)}
    try:
        async with aiosqlite.connect(path) as db:
            async with db.execute("SELECT COUNT(*) FROM kv_entries") as cursor:
                (report["entry_count"],) = await cursor.fetchone()
            for label, set_key in COUNTED_SETS.items():
                async with db.execute(
                    "SELECT COUNT(*) FROM kv_set_members WHERE set_key = ?", (set_key,)
                ) as cursor:
                    (report[label],) = await cursor.fetchone()
    except (aiosqlite.Error, OSError) as e:
        log.error("database_health_check_failed", path=str(path), error=str(e))
        return {"status": "unhealthy", "error": str(e)}
    return report
