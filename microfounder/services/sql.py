"""
Relational store: tables of JSON-ish rows with equality filters.

Remote: SQLAlchemy async engine (FF_USE_DATABASE). Local: in-process
FallbackStore mapping table name → list of row dicts, insertion ordered.

Every value goes through bound parameters. Table and column names cannot be
bound, so they are validated against a strict identifier pattern instead.
"""

import logging
import re
from typing import Any, Optional

from sqlalchemy import text

from .fallback import FallbackStore, ResilientStore
from ..core.flags import get_flags
from ..models.base import new_uuid

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _ident(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def _where_clause(where: Optional[dict], prefix: str = "w") -> tuple[str, dict]:
    """Build 'col = :w0 AND col = :w1' plus its params. Empty filter → ''."""
    if not where:
        return "", {}
    conditions = []
    params = {}
    for i, (column, value) in enumerate(where.items()):
        name = f"{prefix}{i}"
        conditions.append(f"{_ident(column)} = :{name}")
        params[name] = value
    return " WHERE " + " AND ".join(conditions), params


def _require_filter(operation: str, where: Optional[dict]) -> None:
    if not where:
        raise ValueError(f"{operation} requires a non-empty filter")


def _matches(row: dict, where: Optional[dict]) -> bool:
    if not where:
        return True
    return all(row.get(column) == value for column, value in where.items())


class SQLStore(ResilientStore):
    name = "sql"

    # ── Raw statements ───────────────────────────────────────────────

    async def _remote_query(self, sql: str, params: Optional[dict] = None) -> list[dict]:
        engine = self._remote()
        async with engine.begin() as conn:
            result = await conn.execute(text(sql), params or {})
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings().all()]

    async def _remote_execute(self, sql: str, params: Optional[dict] = None) -> dict:
        engine = self._remote()
        async with engine.begin() as conn:
            result = await conn.execute(text(sql), params or {})
            return {"rows_affected": max(result.rowcount or 0, 0)}

    async def query(self, sql: str, params: Optional[dict] = None) -> list[dict]:
        """Run a row-returning statement. Failure → []."""
        try:
            return await self._remote_query(sql, params)
        except Exception as e:
            self._degrade("query", e)
            return []

    async def execute(self, sql: str, params: Optional[dict] = None) -> dict:
        """Run a statement. Failure → {"rows_affected": 0}; raw SQL can't be replayed locally."""
        try:
            return await self._remote_execute(sql, params)
        except Exception as e:
            self._degrade("execute", e)
            return {"rows_affected": 0}

    # ── Table helpers ────────────────────────────────────────────────

    def _table(self, table: str) -> list[dict]:
        rows = self._local.get(table)
        if rows is None:
            rows = []
            self._local.set(table, rows)
        return rows

    async def create_table(self, table: str, schema: dict[str, str]) -> None:
        """CREATE TABLE IF NOT EXISTS. Idempotent; failures are logged, not raised."""
        columns = ", ".join(f"{_ident(column)} {kind}" for column, kind in schema.items())
        self._table(_ident(table))
        try:
            await self._remote_execute(f"CREATE TABLE IF NOT EXISTS {table} ({columns})")
        except Exception as e:
            self._degrade("create_table", e)

    async def insert(self, table: str, data: dict) -> dict:
        """Insert one row. Always returns {"id": ...}."""
        row = dict(data)
        if not row.get("id"):
            row["id"] = new_uuid()

        columns = [_ident(column) for column in row]
        placeholders = ", ".join(f":v{i}" for i in range(len(columns)))
        params = {f"v{i}": value for i, value in enumerate(row.values())}
        sql = (
            f"INSERT INTO {_ident(table)} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING id"
        )

        try:
            result = await self._remote_query(sql, params)
            if result and result[0].get("id"):
                row["id"] = result[0]["id"]
        except Exception as e:
            self._degrade("insert", e)

        self._table(table).append(row)
        return {"id": row["id"]}

    async def select(self, table: str, where: Optional[dict] = None) -> list[dict]:
        """Rows matching every column = value pair. Empty when nothing matches."""
        clause, params = _where_clause(where)
        sql = f"SELECT * FROM {_ident(table)}{clause}"
        try:
            return await self._remote_query(sql, params)
        except Exception as e:
            self._degrade("select", e)
        return [dict(row) for row in self._table(table) if _matches(row, where)]

    async def update(self, table: str, data: dict, where: dict) -> dict:
        """Set columns on matching rows. An empty filter raises ValueError."""
        _require_filter("update", where)
        sets = ", ".join(f"{_ident(column)} = :s{i}" for i, column in enumerate(data))
        params = {f"s{i}": value for i, value in enumerate(data.values())}
        clause, where_params = _where_clause(where)
        params.update(where_params)
        sql = f"UPDATE {_ident(table)} SET {sets}{clause}"

        affected = 0
        for row in self._table(table):
            if _matches(row, where):
                row.update(data)
                affected += 1

        try:
            return await self._remote_execute(sql, params)
        except Exception as e:
            self._degrade("update", e)
            return {"rows_affected": affected}

    async def delete(self, table: str, where: dict) -> dict:
        _require_filter("delete", where)
        clause, params = _where_clause(where)
        sql = f"DELETE FROM {_ident(table)}{clause}"

        rows = self._table(table)
        kept = [row for row in rows if not _matches(row, where)]
        affected = len(rows) - len(kept)
        rows[:] = kept

        try:
            return await self._remote_execute(sql, params)
        except Exception as e:
            self._degrade("delete", e)
            return {"rows_affected": affected}


# ── Process-wide instance ────────────────────────────────────────────

_store: Optional[SQLStore] = None


def get_sql_store(fallback: Optional[FallbackStore] = None) -> SQLStore:
    global _store
    if _store is None:
        remote = None
        if get_flags().use_database:
            from ..core.database import get_engine
            remote = get_engine()
        _store = SQLStore(remote=remote, fallback=fallback)
        logger.info("SQL store ready (remote=%s)", "database" if remote else "off")
    return _store
