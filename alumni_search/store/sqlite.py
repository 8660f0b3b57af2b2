"""SQLite-backed profile store.

Each FieldMatch compiles to an EXISTS sub-select over profile_fields using
LIKE with escaped wildcards; AnyOf/AllOf compile to OR/AND. Queries run in
a worker thread so the event loop never blocks on the database.
"""

import asyncio
import logging
import sqlite3
import threading

from alumni_search.core.errors import StoreUnavailableError
from alumni_search.core.query import AllOf, AnyOf, Clause, DocumentQuery, FieldMatch
from alumni_search.core.schemas import Profile
from alumni_search.store.base import ProfileStore

logger = logging.getLogger(__name__)

_FIELD_MATCH_SQL = (
    "EXISTS (SELECT 1 FROM profile_fields f "
    "WHERE f.profile_id = p.id AND f.field = ? AND f.value LIKE ? ESCAPE '\\')"
)


class SQLiteProfileStore(ProfileStore):
    """Profile store over the connection returned by init_db()."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()

    @property
    def store_id(self) -> str:
        return "sqlite"

    async def find(self, query: DocumentQuery, limit: int) -> list[Profile]:
        where, params = compile_clause(query.clause)
        sql = f"SELECT p.doc FROM profiles p WHERE {where} ORDER BY p.id LIMIT ?"
        rows = await asyncio.to_thread(self._fetch, sql, [*params, limit])
        return [Profile.model_validate_json(row["doc"]) for row in rows]

    async def count(self, query: DocumentQuery) -> int:
        where, params = compile_clause(query.clause)
        sql = f"SELECT COUNT(*) AS n FROM profiles p WHERE {where}"
        rows = await asyncio.to_thread(self._fetch, sql, params)
        return int(rows[0]["n"])

    def _fetch(self, sql: str, params: list[object]) -> list[sqlite3.Row]:
        try:
            with self._lock:
                return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            msg = f"SQLite query failed: {e}"
            raise StoreUnavailableError(msg) from e


def compile_clause(clause: Clause) -> tuple[str, list[object]]:
    """Compile a clause tree into a WHERE fragment and its parameters."""
    if isinstance(clause, FieldMatch):
        return _FIELD_MATCH_SQL, [clause.field, f"%{_escape_like(clause.term.lower())}%"]

    if isinstance(clause, AnyOf):
        if not clause.clauses:
            return "0", []
        joiner = " OR "
    elif isinstance(clause, AllOf):
        if not clause.clauses:
            return "1", []
        joiner = " AND "
    else:
        msg = f"Unsupported clause type: {type(clause).__name__}"
        raise TypeError(msg)

    parts: list[str] = []
    params: list[object] = []
    for child in clause.clauses:
        sql, child_params = compile_clause(child)
        parts.append(sql)
        params.extend(child_params)
    return f"({joiner.join(parts)})", params


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
