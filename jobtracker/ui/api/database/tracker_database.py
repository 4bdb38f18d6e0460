"""SQLite record store for users and their job applications"""

import re
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any
from contextlib import contextmanager
import logging

from jobtracker.tracker.models import ApplicationStatus
from ..exceptions import DuplicateResourceException, InvalidIdentifierException

logger = logging.getLogger(__name__)

APPLICATION_ID_PATTERN = re.compile(r"^app_[0-9a-f]{12}$")
USER_ID_PATTERN = re.compile(r"^user_[0-9a-f]{12}$")

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in ApplicationStatus)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TrackerDatabase:
    """SQLite database manager for users and application records.

    Every application query is scoped by ``user_id``; a record owned by
    someone else behaves exactly like a missing one.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else Path("data/jobtracker.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def get_connection(self):
        """Get database connection with automatic cleanup"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("SELECT version FROM schema_version")
            row = cursor.fetchone()
            current_version = row[0] if row else 0

            if current_version < self.SCHEMA_VERSION:
                self._create_schema(cursor)
                cursor.execute("DELETE FROM schema_version")
                cursor.execute("INSERT INTO schema_version (version) VALUES (?)",
                               (self.SCHEMA_VERSION,))
                logger.info(f"Database schema updated to version {self.SCHEMA_VERSION}")

    def _create_schema(self, cursor):
        """Create all database tables"""

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL COLLATE NOCASE,
                password_hash TEXT NOT NULL,
                reset_token TEXT,
                reset_token_expires TIMESTAMP,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        """)
        cursor.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users(email)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_reset ON users(reset_token)")

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS applications (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                job_title TEXT NOT NULL,
                company TEXT NOT NULL,
                location TEXT,
                date DATE NOT NULL,
                status TEXT NOT NULL DEFAULT 'applied' CHECK(status IN ({_STATUS_VALUES})),
                notes TEXT,
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_applications_user_date ON applications(user_id, date DESC)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_applications_user_status ON applications(user_id, status)")

    # ============== User Operations ==============

    def create_user(self, name: str, email: str, password_hash: str) -> Dict:
        """Insert a user, returns the stored row"""
        user_id = f"user_{uuid.uuid4().hex[:12]}"
        now = _now()

        with self.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    INSERT INTO users (id, name, email, password_hash, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (user_id, name, email, password_hash, now, now))
            except sqlite3.IntegrityError:
                raise DuplicateResourceException("User", "email", email) from None

        return self.get_user(user_id)

    def get_user(self, user_id: str) -> Optional[Dict]:
        """Get user by ID"""
        if not USER_ID_PATTERN.match(user_id or ""):
            return None
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[Dict]:
        """Get user by email (case-insensitive)"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE email = ?", (email.strip(),))
            row = cursor.fetchone()
            return dict(row) if row else None

    def set_reset_token(self, user_id: str, token: str, expires_at: datetime):
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE users SET reset_token = ?, reset_token_expires = ?, updated_at = ?
                WHERE id = ?
            """, (token, expires_at.isoformat(), _now(), user_id))

    def get_user_by_reset_token(self, token: str, now: datetime) -> Optional[Dict]:
        """Get the user holding a reset token that has not expired yet"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT * FROM users
                WHERE reset_token = ? AND reset_token_expires > ?
            """, (token, now.isoformat()))
            row = cursor.fetchone()
            return dict(row) if row else None

    def update_password(self, user_id: str, password_hash: str):
        """Store a new password hash and invalidate any reset token"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE users SET password_hash = ?, reset_token = NULL,
                    reset_token_expires = NULL, updated_at = ?
                WHERE id = ?
            """, (password_hash, _now(), user_id))

    def list_users(self) -> List[Dict]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, name, email, created_at FROM users ORDER BY created_at")
            return [dict(r) for r in cursor.fetchall()]

    def delete_user_by_email(self, email: str) -> bool:
        """Delete a user and, through the cascade, all of their applications"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM users WHERE email = ?", (email.strip(),))
            return cursor.rowcount > 0

    # ============== Application Operations ==============

    @staticmethod
    def _check_application_id(app_id: str):
        if not APPLICATION_ID_PATTERN.match(app_id or ""):
            raise InvalidIdentifierException("Application", app_id)

    def get_applications(self, user_id: str, status: Optional[str] = None) -> List[Dict]:
        """Get a user's applications, newest date first, optional status filter"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            conditions = ["user_id = ?"]
            params: List[Any] = [user_id]

            if status:
                conditions.append("status = ?")
                params.append(status)

            where_clause = " AND ".join(conditions)
            cursor.execute(f"""
                SELECT * FROM applications
                WHERE {where_clause}
                ORDER BY date DESC, created_at DESC
            """, params)

            return [dict(r) for r in cursor.fetchall()]

    def get_application(self, app_id: str, user_id: str) -> Optional[Dict]:
        self._check_application_id(app_id)
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM applications WHERE id = ? AND user_id = ?",
                (app_id, user_id),
            )
            row = cursor.fetchone()
            return dict(row) if row else None

    def create_application(self, user_id: str, data: Dict) -> Dict:
        """Insert an application owned by ``user_id``, returns the stored row"""
        app_id = f"app_{uuid.uuid4().hex[:12]}"
        now = _now()

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO applications (
                    id, user_id, job_title, company, location, date, status, notes,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                app_id,
                user_id,
                data["job_title"],
                data["company"],
                data.get("location"),
                data["date"],
                data.get("status", ApplicationStatus.APPLIED.value),
                data.get("notes"),
                now,
                now,
            ))

        return self.get_application(app_id, user_id)

    def update_application(self, app_id: str, user_id: str, data: Dict) -> Optional[Dict]:
        """Update an owned application; None when missing or owned by someone else"""
        self._check_application_id(app_id)

        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE applications SET
                    job_title = ?,
                    company = ?,
                    location = ?,
                    date = ?,
                    status = ?,
                    notes = ?,
                    updated_at = ?
                WHERE id = ? AND user_id = ?
            """, (
                data["job_title"],
                data["company"],
                data.get("location"),
                data["date"],
                data.get("status", ApplicationStatus.APPLIED.value),
                data.get("notes"),
                _now(),
                app_id,
                user_id,
            ))
            if cursor.rowcount == 0:
                return None

        return self.get_application(app_id, user_id)

    def delete_application(self, app_id: str, user_id: str) -> bool:
        """Delete an owned application"""
        self._check_application_id(app_id)
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM applications WHERE id = ? AND user_id = ?",
                (app_id, user_id),
            )
            return cursor.rowcount > 0


# Singleton instance
_db_instance: Optional[TrackerDatabase] = None


def get_tracker_database() -> TrackerDatabase:
    """Get or create database instance"""
    global _db_instance
    if _db_instance is None:
        from ..config import get_settings
        _db_instance = TrackerDatabase(Path(get_settings().database_path))
    return _db_instance
