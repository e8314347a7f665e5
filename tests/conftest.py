"""
pytest configuration and fixtures for the API test suite
The FastAPI app runs in-process over httpx's ASGI transport with the
database dependency replaced by an in-memory recorder.
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Settings refuse to import without a database target
os.environ.setdefault("DB_NAME", "dynamic_fields_test")
os.environ.setdefault("DB_SSL", "false")

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

import httpx
import pytest
import pytest_asyncio

from app import create_app
from database.connection import get_database
from database.errors import DatabaseQueryError


class SimulatedDriverError(Exception):
    """Stands in for an asyncpg error"""


class FakeConnection:
    """Connection handed out inside FakeDatabase.transaction()"""

    def __init__(self, database: "FakeDatabase"):
        self.database = database
        self.statements: List[Tuple[str, Any]] = []

    def _record(self, query: str, args: Any):
        self.database.check(query)
        self.statements.append((query, args))

    async def fetchval(self, query: str, *args):
        self._record(query, args)
        return self.database.allocate_id()

    async def execute(self, query: str, *args):
        self._record(query, args)
        return "OK"

    async def executemany(self, query: str, args):
        self._record(query, list(args))


class FakeDatabase:
    """
    Records every statement and answers reads from canned results.

    Results are matched by the first marker contained in the query.
    Statements containing `fail_on` raise a simulated driver error.
    """

    def __init__(self):
        self.queries: List[Tuple[str, List[Any]]] = []
        self.results: List[Tuple[str, List[Dict[str, Any]]]] = []
        self.fail_on: Optional[str] = None
        self.committed: List[FakeConnection] = []
        self.rolled_back: List[FakeConnection] = []
        self._next_id = 1

    def add_result(self, marker: str, rows: List[Dict[str, Any]]):
        self.results.append((marker, rows))

    def allocate_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def check(self, query: str):
        if self.fail_on and self.fail_on in query:
            raise SimulatedDriverError(f"simulated failure near: {self.fail_on}")

    async def execute_query(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.queries.append((query, list(params)))
        try:
            self.check(query)
        except SimulatedDriverError as e:
            raise DatabaseQueryError() from e

        for marker, rows in self.results:
            if marker in query:
                return [dict(row) for row in rows]
        return []

    async def fetch_value(self, query: str, params: Sequence[Any] = ()) -> Any:
        rows = await self.execute_query(query, params)
        return next(iter(rows[0].values())) if rows else 1

    @asynccontextmanager
    async def transaction(self):
        conn = FakeConnection(self)
        try:
            yield conn
        except Exception as e:
            self.rolled_back.append(conn)
            raise DatabaseQueryError() from e
        self.committed.append(conn)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def app(fake_db):
    application = create_app()
    application.dependency_overrides[get_database] = lambda: fake_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    """In-process HTTP client; lifespan is not run, so no pool is created"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
