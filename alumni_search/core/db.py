"""SQLite database layer for the alumni directory and the search log.

Profiles are stored as JSON documents. Every text value is also written to
profile_fields under its dotted path (list indices dropped, value
lower-cased) so stores can run per-field substring predicates in SQL.
"""

import json
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter

from alumni_search.core.schemas import Profile, SearchIntent

_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS profiles (
    id          TEXT PRIMARY KEY,
    doc         TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

_PROFILE_FIELDS_TABLE = """
CREATE TABLE IF NOT EXISTS profile_fields (
    profile_id  TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    field       TEXT NOT NULL,
    value       TEXT NOT NULL
);
"""

_PROFILE_FIELDS_INDEX = """
CREATE INDEX IF NOT EXISTS idx_profile_fields_field
    ON profile_fields (field, profile_id);
"""

_SEARCH_LOG_TABLE = """
CREATE TABLE IF NOT EXISTS search_log (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id       TEXT    NOT NULL,
    query         TEXT    NOT NULL,
    intent_json   TEXT    NOT NULL,
    result_count  INTEGER NOT NULL,
    follow_up     INTEGER NOT NULL DEFAULT 0,
    error         TEXT,
    started_at    TEXT    NOT NULL,
    finished_at   TEXT    NOT NULL
);
"""

_profile_list = TypeAdapter(list[Profile])


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection.

    The connection may be used from worker threads; callers serialize access.
    """
    path = Path(path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    if str(path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_PROFILES_TABLE)
    conn.execute(_PROFILE_FIELDS_TABLE)
    conn.execute(_PROFILE_FIELDS_INDEX)
    conn.execute(_SEARCH_LOG_TABLE)
    conn.commit()
    return conn


def upsert_profile(conn: sqlite3.Connection, profile: Profile) -> bool:
    """Insert or replace a profile and its field index.

    Returns True if a new row was inserted, False if an existing one was replaced.
    """
    existed = conn.execute(
        "SELECT 1 FROM profiles WHERE id = ?", (profile.id,),
    ).fetchone() is not None
    with conn:
        conn.execute(
            """
            INSERT INTO profiles (id, doc, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET doc = excluded.doc, updated_at = excluded.updated_at
            """,
            (profile.id, profile.model_dump_json(), datetime.now().isoformat()),
        )
        conn.execute("DELETE FROM profile_fields WHERE profile_id = ?", (profile.id,))
        conn.executemany(
            "INSERT INTO profile_fields (profile_id, field, value) VALUES (?, ?, ?)",
            [(profile.id, field, value.lower()) for field, value in profile.flatten()],
        )
    return not existed


def upsert_profiles(conn: sqlite3.Connection, profiles: Iterable[Profile]) -> int:
    """Upsert many profiles. Returns the number of newly inserted rows."""
    return sum(1 for p in profiles if upsert_profile(conn, p))


def get_profile(conn: sqlite3.Connection, profile_id: str) -> Profile | None:
    row = conn.execute("SELECT doc FROM profiles WHERE id = ?", (profile_id,)).fetchone()
    if row is None:
        return None
    return Profile.model_validate_json(row["doc"])


def delete_profile(conn: sqlite3.Connection, profile_id: str) -> bool:
    """Delete a profile. Returns True if a row was removed."""
    with conn:
        conn.execute("DELETE FROM profile_fields WHERE profile_id = ?", (profile_id,))
        cursor = conn.execute("DELETE FROM profiles WHERE id = ?", (profile_id,))
    return cursor.rowcount > 0


def count_profiles(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) AS n FROM profiles").fetchone()
    return int(row["n"])


def insert_search_log(
    conn: sqlite3.Connection,
    user_id: str,
    query: str,
    intent: SearchIntent,
    result_count: int,
    follow_up: bool,
    started_at: datetime,
    finished_at: datetime,
    error: str | None = None,
) -> int:
    """Record a handled query. Returns the row ID."""
    cursor = conn.execute(
        """
        INSERT INTO search_log
            (user_id, query, intent_json, result_count, follow_up, error,
             started_at, finished_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            query,
            intent.model_dump_json(),
            result_count,
            int(follow_up),
            error,
            started_at.isoformat(),
            finished_at.isoformat(),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def load_profiles_file(path: str | Path) -> list[Profile]:
    """Read a JSON or YAML file holding a list of profiles."""
    path = Path(path)
    if not path.exists():
        msg = f"Profiles file not found: {path}"
        raise FileNotFoundError(msg)
    text = path.read_text()
    raw: Any
    if path.suffix.lower() in (".yaml", ".yml"):
        raw = yaml.safe_load(text) or []
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Failed to parse profiles file as JSON: {e}"
            raise ValueError(msg) from e
    if isinstance(raw, dict):
        raw = raw.get("profiles", [])
    return _profile_list.validate_python(raw)
