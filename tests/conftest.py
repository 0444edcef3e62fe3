"""
pytest configuration and fixtures for the users backend test suite
The app runs in-process against an in-memory database client.
"""

import copy
import uuid
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from app import create_app
from config.settings import Settings
from database.connection import DatabaseClient
from database.query import (
    DELETE,
    INSERT,
    SELECT,
    UPDATE,
    DatabaseError,
    ErrorKind,
    InvalidQueryError,
    Query,
    QueryResult,
    build_sql,
)


class InMemoryDatabaseClient(DatabaseClient):
    """DatabaseClient that keeps tables as lists of dicts"""

    def __init__(self):
        super().__init__("postgresql://in-memory")
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.executed: List[Query] = []
        self.next_error: Optional[DatabaseError] = None
        self.healthy = True

    async def connect(self):
        pass

    async def close(self):
        pass

    async def ping(self) -> bool:
        return self.healthy

    def seed(self, table: str, rows: List[Dict[str, Any]]):
        self.tables.setdefault(table, []).extend(copy.deepcopy(rows))

    def fail_next(self, kind: str, message: str = "injected failure"):
        self.next_error = DatabaseError(kind, message)

    async def execute(self, query: Query) -> QueryResult:
        self.executed.append(copy.deepcopy(query))
        try:
            build_sql(query)
        except InvalidQueryError as e:
            return QueryResult(error=DatabaseError(ErrorKind.QUERY, str(e)))

        if self.next_error is not None:
            error, self.next_error = self.next_error, None
            return QueryResult(error=error)

        rows = self.tables.setdefault(query.table, [])

        if query.action == SELECT:
            return QueryResult(data=[dict(row) for row in rows if query.matches(row)])

        if query.action == INSERT:
            created = []
            for values in query.rows:
                row = {"id": str(uuid.uuid4()), **values}
                rows.append(row)
                created.append(dict(row))
            return QueryResult(data=created)

        if query.action == UPDATE:
            updated = []
            for row in rows:
                if query.matches(row):
                    row.update(query.patch)
                    updated.append(dict(row))
            return QueryResult(data=updated)

        if query.action == DELETE:
            deleted = [dict(row) for row in rows if query.matches(row)]
            self.tables[query.table] = [row for row in rows if not query.matches(row)]
            return QueryResult(data=deleted)

        raise AssertionError(f"Unexpected action {query.action}")


@pytest.fixture
def settings():
    return Settings(
        database_url="postgresql://test",
        allowed_origins=["http://localhost:8000", "http://localhost:5173"],
    )


@pytest.fixture
def db_client():
    return InMemoryDatabaseClient()


@pytest.fixture
def app(settings, db_client):
    return create_app(settings, db_client=db_client)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
