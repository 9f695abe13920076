"""
FitBot Store Client
===================
Generic table query client over PostgreSQL (psycopg2, RealDictCursor).

Supports what the handlers need and nothing more: equality / IN filters,
ordering, limiting, select-projection, insert, update, delete, and a
transactional replace used for answer sets.

Tables are addressed as "schema.table" strings, e.g. "questionnaire.runs"
or 'public.Users'. Every psycopg2 error is wrapped into STORE_ERROR.

Usage:
    with open_client(settings) as client:
        rows = client.select("questionnaire.runs", filters={"user_id": uid},
                             order_by="started_at", descending=True, limit=1)
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor
from fastapi import Depends

from fitbot.config import Settings, get_settings
from fitbot.shared.errors import ErrorCode, FitbotException

logger = logging.getLogger(__name__)


# ============================================
# TABLES
# ============================================

FORMS_TABLE = "questionnaire.forms"
SECTIONS_TABLE = "questionnaire.sections"
QUESTIONS_TABLE = "questionnaire.questions"
RUNS_TABLE = "questionnaire.runs"
ANSWERS_TABLE = "questionnaire.answers"
USERS_TABLE = "public.Users"
FITNESS_HISTORY_TABLE = "public.fitness_history"


Filters = Dict[str, Any]
Row = Dict[str, Any]


def _table_identifier(table: str) -> sql.Composable:
    schema, _, name = table.rpartition(".")
    if schema:
        return sql.Identifier(schema, name)
    return sql.Identifier(name)


def _adapt(value: Any) -> Any:
    """Wrap dict/list values so they land in JSONB columns."""
    if isinstance(value, (dict, list)):
        return Json(value)
    return value


def _where(filters: Optional[Filters]) -> Tuple[sql.Composable, List[Any]]:
    if not filters:
        return sql.SQL(""), []

    clauses = []
    params: List[Any] = []
    for column, value in filters.items():
        if isinstance(value, (list, tuple, set)):
            # Tuples render as an untyped (a, b) literal; Postgres casts it to the column type.
            clauses.append(sql.SQL("{} IN %s").format(sql.Identifier(column)))
            params.append(tuple(value))
        elif value is None:
            clauses.append(sql.SQL("{} IS NULL").format(sql.Identifier(column)))
        else:
            clauses.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
            params.append(value)

    return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params


def _has_empty_in_filter(filters: Optional[Filters]) -> bool:
    return any(
        isinstance(value, (list, tuple, set)) and len(value) == 0
        for value in (filters or {}).values()
    )


def _projection(columns: Optional[Sequence[str]]) -> sql.Composable:
    if not columns:
        return sql.SQL("*")
    return sql.SQL(", ").join(sql.Identifier(c) for c in columns)


class TableClient:
    """Thin query client bound to one psycopg2 connection."""

    def __init__(self, conn):
        self._conn = conn

    # ----------------------------------------
    # Reads
    # ----------------------------------------

    def select(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        if _has_empty_in_filter(filters):
            return []

        where, params = _where(filters)
        query = sql.SQL("SELECT {} FROM {}").format(
            _projection(columns), _table_identifier(table)
        ) + where
        if order_by:
            query += sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(order_by), sql.SQL("DESC" if descending else "ASC")
            )
        if limit is not None:
            query += sql.SQL(" LIMIT %s")
            params.append(limit)

        return self._fetch(query, params, table)

    def select_one(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Optional[Row]:
        rows = self.select(table, columns, filters, order_by, descending, limit=1)
        return rows[0] if rows else None

    # ----------------------------------------
    # Writes
    # ----------------------------------------

    def insert(self, table: str, rows: Sequence[Row]) -> List[Row]:
        """Insert rows (all with the same keys) and return them as stored."""
        if not rows:
            return []
        return self._execute_in_transaction(table, lambda cur: self._insert(cur, table, rows))

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        """Update matching rows and return them as stored."""
        if not filters:
            raise FitbotException(ErrorCode.STORE_ERROR, f"Refusing unfiltered update on {table}")

        def _run(cur):
            assignments = sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
            )
            where, params = _where(filters)
            query = sql.SQL("UPDATE {} SET {}").format(
                _table_identifier(table), assignments
            ) + where + sql.SQL(" RETURNING *")
            cur.execute(query, [_adapt(v) for v in values.values()] + params)
            return [dict(r) for r in cur.fetchall()]

        return self._execute_in_transaction(table, _run)

    def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows and return the count."""
        if not filters:
            raise FitbotException(ErrorCode.STORE_ERROR, f"Refusing unfiltered delete on {table}")
        return self._execute_in_transaction(table, lambda cur: self._delete(cur, table, filters))

    def replace(self, table: str, scope: Filters, rows: Sequence[Row]) -> List[Row]:
        """
        Replace every row matching ``scope`` with ``rows`` in one transaction.

        An empty ``rows`` clears the scope. On any failure nothing changes.
        """
        if not scope:
            raise FitbotException(ErrorCode.STORE_ERROR, f"Refusing unscoped replace on {table}")

        def _run(cur):
            self._delete(cur, table, scope)
            if not rows:
                return []
            return self._insert(cur, table, rows)

        return self._execute_in_transaction(table, _run)

    def ping(self) -> bool:
        self._fetch(sql.SQL("SELECT 1 AS ok"), [], "ping")
        return True

    # ----------------------------------------
    # Internals
    # ----------------------------------------

    def _insert(self, cur, table: str, rows: Sequence[Row]) -> List[Row]:
        columns = list(rows[0].keys())
        query = sql.SQL("INSERT INTO {} ({}) VALUES {} RETURNING *").format(
            _table_identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(
                sql.SQL("({})").format(sql.SQL(", ").join([sql.Placeholder()] * len(columns)))
                for _ in rows
            ),
        )
        params = [_adapt(row.get(c)) for row in rows for c in columns]
        cur.execute(query, params)
        return [dict(r) for r in cur.fetchall()]

    def _delete(self, cur, table: str, filters: Filters) -> int:
        where, params = _where(filters)
        cur.execute(sql.SQL("DELETE FROM {}").format(_table_identifier(table)) + where, params)
        return cur.rowcount

    def _fetch(self, query: sql.Composable, params: List[Any], table: str) -> List[Row]:
        def _run(cur):
            cur.execute(query, params)
            return [dict(r) for r in cur.fetchall()]

        return self._execute_in_transaction(table, _run)

    def _execute_in_transaction(self, table: str, fn):
        try:
            with self._conn:
                with self._conn.cursor(cursor_factory=RealDictCursor) as cur:
                    return fn(cur)
        except psycopg2.Error as e:
            logger.error(f"Store error on {table}: {e}")
            raise FitbotException(ErrorCode.STORE_ERROR, str(e).strip() or f"Store error on {table}")


# ============================================
# CONNECTIONS
# ============================================

def connect(settings: Settings):
    """Open a psycopg2 connection from settings."""
    if not settings.database_url:
        raise FitbotException(ErrorCode.CONFIGURATION_ERROR, "DATABASE_URL is not configured")
    try:
        return psycopg2.connect(settings.database_url, cursor_factory=RealDictCursor)
    except psycopg2.Error as e:
        logger.error(f"Database connection error: {e}")
        raise FitbotException(ErrorCode.STORE_ERROR, "Database connection failed")


@contextmanager
def open_client(settings: Settings) -> Iterator[TableClient]:
    conn = connect(settings)
    try:
        yield TableClient(conn)
    finally:
        conn.close()


def get_client(settings: Settings = Depends(get_settings)) -> Iterator[TableClient]:
    """FastAPI dependency: one connection per request."""
    with open_client(settings) as client:
        yield client
