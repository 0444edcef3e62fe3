"""
Fluent query building for the remote row store

A QueryBuilder collects one action (select / insert / update / delete) and its
equality filters, then hands the finished Query to the client that created it.
Results always come back as a QueryResult holding either rows or an error.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SELECT = "select"
INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


class ErrorKind:
    """Error kinds reported by the database adapter"""
    CONFLICT = "CONFLICT"
    INVALID_INPUT = "INVALID_INPUT"
    CONNECTION = "CONNECTION"
    QUERY = "QUERY"


class InvalidQueryError(ValueError):
    """Raised while building SQL for a query that cannot be expressed safely"""


@dataclass
class DatabaseError:
    """Error value returned instead of raising on remote failures"""
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


@dataclass
class QueryResult:
    """Rows returned by a query, or the error that prevented it"""
    data: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[DatabaseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def first(self) -> Optional[Dict[str, Any]]:
        return self.data[0] if self.data else None


@dataclass
class Query:
    """A fully described single-table operation"""
    table: str
    action: str = SELECT
    columns: str = "*"
    rows: List[Dict[str, Any]] = field(default_factory=list)
    patch: Dict[str, Any] = field(default_factory=dict)
    filters: List[Tuple[str, Any]] = field(default_factory=list)

    def matches(self, row: Dict[str, Any]) -> bool:
        """Check a row against every equality filter"""
        return all(row.get(column) == value for column, value in self.filters)


class QueryBuilder:
    """Chainable builder bound to a client and a table"""

    def __init__(self, client, table: str):
        self._client = client
        self._query = Query(table=table)
        self._action_set = False

    @property
    def query(self) -> Query:
        return self._query

    def _set_action(self, action: str):
        if self._action_set:
            raise InvalidQueryError(f"Query already has action '{self._query.action}'")
        self._query.action = action
        self._action_set = True

    def select(self, columns: str = "*") -> "QueryBuilder":
        """Read rows, or choose returned columns after insert/update/delete"""
        if not self._action_set:
            self._set_action(SELECT)
        self._query.columns = columns
        return self

    def insert(self, rows: Union[Dict[str, Any], List[Dict[str, Any]]]) -> "QueryBuilder":
        self._set_action(INSERT)
        self._query.rows = [rows] if isinstance(rows, dict) else list(rows)
        return self

    def update(self, patch: Dict[str, Any]) -> "QueryBuilder":
        self._set_action(UPDATE)
        self._query.patch = dict(patch)
        return self

    def delete(self) -> "QueryBuilder":
        self._set_action(DELETE)
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        """Add an equality filter, AND-combined with the others"""
        self._query.filters.append((column, value))
        return self

    async def execute(self) -> QueryResult:
        return await self._client.execute(self._query)


def quote_identifier(name: str) -> str:
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise InvalidQueryError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def _column_list(columns: str) -> str:
    columns = columns.strip()
    if columns == "*":
        return "*"
    names = [column.strip() for column in columns.split(",")]
    return ", ".join(quote_identifier(name) for name in names)


def _where_clause(filters: List[Tuple[str, Any]], params: List[Any]) -> str:
    parts = []
    for column, value in filters:
        params.append(value)
        parts.append(f"{quote_identifier(column)} = ${len(params)}")
    return " WHERE " + " AND ".join(parts) if parts else ""


def build_sql(query: Query) -> Tuple[str, List[Any]]:
    """Translate a Query into parameterised Postgres SQL"""
    table = quote_identifier(query.table)
    columns = _column_list(query.columns)
    params: List[Any] = []

    if query.action == SELECT:
        sql = f"SELECT {columns} FROM {table}"
        sql += _where_clause(query.filters, params)
        return sql, params

    if query.action == INSERT:
        if not query.rows:
            raise InvalidQueryError("Insert requires at least one row")
        field_names = list(query.rows[0].keys())
        if not field_names:
            raise InvalidQueryError("Insert rows must have at least one column")
        value_groups = []
        for row in query.rows:
            if set(row.keys()) != set(field_names):
                raise InvalidQueryError("All inserted rows must have the same columns")
            placeholders = []
            for name in field_names:
                params.append(row[name])
                placeholders.append(f"${len(params)}")
            value_groups.append(f"({', '.join(placeholders)})")
        quoted = ", ".join(quote_identifier(name) for name in field_names)
        sql = f"INSERT INTO {table} ({quoted}) VALUES {', '.join(value_groups)} RETURNING {columns}"
        return sql, params

    if query.action == UPDATE:
        if not query.patch:
            raise InvalidQueryError("Update requires at least one column")
        if not query.filters:
            raise InvalidQueryError("Update requires a filter")
        set_parts = []
        for name, value in query.patch.items():
            params.append(value)
            set_parts.append(f"{quote_identifier(name)} = ${len(params)}")
        sql = f"UPDATE {table} SET {', '.join(set_parts)}"
        sql += _where_clause(query.filters, params)
        sql += f" RETURNING {columns}"
        return sql, params

    if query.action == DELETE:
        if not query.filters:
            raise InvalidQueryError("Delete requires a filter")
        sql = f"DELETE FROM {table}"
        sql += _where_clause(query.filters, params)
        sql += f" RETURNING {columns}"
        return sql, params

    raise InvalidQueryError(f"Unsupported action: {query.action}")
