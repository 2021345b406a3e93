"""SQLite connection management and schema."""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from . import config

logger = logging.getLogger(__name__)


# =============================================================================
# SQLite3 datetime adapter (Python 3.12 compatibility)
# =============================================================================
def _adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO 8601 string for SQLite."""
    return dt.isoformat()


def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO 8601 string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_datetime)


class Connection(sqlite3.Connection):
    """sqlite3 connection with nestable atomic blocks.

    Repositories call ``commit()`` after every write. Inside ``atomic()``
    those commits are deferred until the outermost block exits, so a
    multi-step operation either lands completely or is rolled back.

    Example:
        >>> with db.atomic():
        ...     photo_repo.detach_from_gallery(gallery_id)
        ...     gallery_repo.delete(gallery_id)
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._atomic_depth = 0

    @property
    def in_atomic_block(self) -> bool:
        return self._atomic_depth > 0

    def commit(self) -> None:
        if self._atomic_depth == 0:
            super().commit()

    @contextmanager
    def atomic(self) -> Iterator["Connection"]:
        self._atomic_depth += 1
        try:
            yield self
        except BaseException:
            self._atomic_depth -= 1
            if self._atomic_depth == 0:
                self.rollback()
            raise
        self._atomic_depth -= 1
        if self._atomic_depth == 0:
            super().commit()


def create_connection(database_path=None) -> Connection:
    """Open a new connection for one request.

    Connections are not shared between requests; callers close them.
    FastAPI may resolve dependencies and run the endpoint on different
    worker threads, hence ``check_same_thread=False``.
    """
    conn = sqlite3.connect(
        database_path or config.DATABASE_PATH,
        factory=Connection,
        detect_types=sqlite3.PARSE_DECLTYPES,
        check_same_thread=False,
        timeout=10,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db: Connection | None = None) -> None:
    """Initialize database schema."""
    owns_connection = db is None
    if owns_connection:
        db = create_connection()

    try:
        db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                profile_picture_filename TEXT,
                profile_picture_content_type TEXT,
                profile_picture_size INTEGER,
                profile_picture_data BLOB
            )
        """)

        db.execute("""
            CREATE TABLE IF NOT EXISTS galleries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT,
                user_id INTEGER NOT NULL,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                UNIQUE(user_id, name)
            )
        """)

        db.execute("""
            CREATE TABLE IF NOT EXISTS photos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                description TEXT,
                original_filename TEXT,
                content_type TEXT,
                size INTEGER,
                data BLOB,
                user_id INTEGER NOT NULL,
                gallery_id INTEGER,
                created_at TIMESTAMP NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (gallery_id) REFERENCES galleries(id) ON DELETE SET NULL
            )
        """)

        db.execute("CREATE INDEX IF NOT EXISTS idx_galleries_user_id ON galleries(user_id)")
        db.execute("CREATE INDEX IF NOT EXISTS idx_photos_user_id ON photos(user_id)")
        db.execute("CREATE INDEX IF NOT EXISTS idx_photos_gallery_id ON photos(gallery_id)")

        db.commit()
        logger.info("Database schema ready at %s", config.DATABASE_PATH)
    finally:
        if owns_connection:
            db.close()


def check_database(db: Connection) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        return db.execute("SELECT 1").fetchone()[0] == 1
    except sqlite3.Error as e:
        logger.warning("Database health check failed: %s", e)
        return False
