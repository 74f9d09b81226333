"""
Saved schema repository: a single sqlite collection of JSON documents.

Each record is keyed by an opaque schema_id and owned by one user_id.
Reads and updates that take a user_id are scoped to that owner.
"""
import json
import logging
import secrets
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

from src.shared.errors import ConflictError

log = logging.getLogger(__name__)

# Columns kept outside the JSON document
RESERVED_FIELDS = ("schemaId", "userId", "dynamic", "createdAt", "updatedAt")
IMMUTABLE_FIELDS = ("schemaId", "userId", "createdAt")

_ID_ATTEMPTS = 3


def new_schema_id() -> str:
    """Short URL-safe id: 11 characters from [A-Za-z0-9_-]."""
    return secrets.token_urlsafe(8)


@dataclass
class SavedSchema:
    """Persisted schema record."""
    schema_id: str
    user_id: str
    dynamic: bool
    document: dict
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        """Wire shape: the record fields plus id, owner, flag and timestamps."""
        return {
            **self.document,
            "schemaId": self.schema_id,
            "userId": self.user_id,
            "dynamic": self.dynamic,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class SchemaRepository:
    """Repository for saved schemas."""

    def __init__(self, db_path: Path):
        """
        Initialize repository.

        Args:
            db_path: Path to schemas.sqlite
        """
        self.db_path = Path(db_path)
        self._init_schema()

    def _init_schema(self):
        """Initialize schemas table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schemas (
                    schema_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    dynamic INTEGER NOT NULL,
                    document_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_schemas_user
                ON schemas(user_id)
            """)
            conn.commit()

    @staticmethod
    def _row_to_schema(row) -> SavedSchema:
        return SavedSchema(
            schema_id=row[0],
            user_id=row[1],
            dynamic=bool(row[2]),
            document=json.loads(row[3]),
            created_at=row[4],
            updated_at=row[5],
        )

    def insert_one(self, user_id: str, record: dict, dynamic: bool = False) -> SavedSchema:
        """
        Store a validated record under a freshly generated schema_id.

        Raises:
            ConflictError: if no unused id could be generated.
        """
        document = {k: v for k, v in record.items() if k not in RESERVED_FIELDS}
        now = datetime.now(UTC).isoformat()

        for _ in range(_ID_ATTEMPTS):
            schema_id = new_schema_id()
            try:
                with sqlite3.connect(self.db_path) as conn:
                    conn.execute("""
                        INSERT INTO schemas (schema_id, user_id, dynamic, document_json, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?)
                    """, (schema_id, user_id, int(dynamic), json.dumps(document), now, now))
                    conn.commit()
            except sqlite3.IntegrityError:
                log.warning("Schema id collision on %s, regenerating", schema_id)
                continue
            return SavedSchema(schema_id, user_id, dynamic, document, now, now)

        raise ConflictError("Could not allocate a unique schema ID")

    def find_one(self, schema_id: str, user_id: Optional[str] = None) -> Optional[SavedSchema]:
        """Get a schema by id, scoped to its owner when user_id is given."""
        query = """
            SELECT schema_id, user_id, dynamic, document_json, created_at, updated_at
            FROM schemas
            WHERE schema_id = ?
        """
        params: list = [schema_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)

        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(query, params).fetchone()

        return self._row_to_schema(row) if row else None

    def update_one(self, schema_id: str, user_id: str, updates: dict) -> Optional[SavedSchema]:
        """
        Replace top-level fields of an owned schema (last write wins).

        `dynamic` updates the flag; immutable fields are ignored here and must
        be rejected by the caller. Returns None when (schema_id, user_id) has
        no match.
        """
        now = datetime.now(UTC).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute("""
                SELECT schema_id, user_id, dynamic, document_json, created_at, updated_at
                FROM schemas
                WHERE schema_id = ? AND user_id = ?
            """, (schema_id, user_id)).fetchone()

            if not row:
                conn.rollback()
                return None

            current = self._row_to_schema(row)
            document = {**current.document}
            document.update({k: v for k, v in updates.items() if k not in RESERVED_FIELDS})
            dynamic = bool(updates["dynamic"]) if "dynamic" in updates else current.dynamic

            conn.execute("""
                UPDATE schemas SET dynamic = ?, document_json = ?, updated_at = ?
                WHERE schema_id = ? AND user_id = ?
            """, (int(dynamic), json.dumps(document), now, schema_id, user_id))
            conn.commit()

        return SavedSchema(schema_id, user_id, dynamic, document, current.created_at, now)
