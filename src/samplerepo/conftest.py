# src/samplerepo/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
No RethinkDB server is needed: the driver is replaced by a MagicMock, and
repository tests run against an in-memory DatabaseRepository.
"""

import dataclasses
import os

# Set environment BEFORE importing any app modules
os.environ["SAMPLEREPO_ENV"] = "test"

from unittest.mock import MagicMock, patch

import pytest

from samplerepo.db import DatabaseRepository
from samplerepo.schema import Schema

# =============================================================================
# Test Doubles
# =============================================================================


class FakeCursor:
    """Iterable stand-in for a driver cursor that records close()."""

    def __init__(self, rows):
        self._rows = list(rows)
        self.closed = False

    def __iter__(self):
        return iter(self._rows)

    def close(self):
        self.closed = True


class InMemoryDatabaseRepository(DatabaseRepository):
    """
    DatabaseRepository keeping rows in dicts instead of a server.

    Rows are keyed by their `id` primary key. Predicates must be dicts of
    field values, which is all the entity repositories use.
    """

    def __init__(self, host: str = "localhost", port: int = 28015, force_drop: bool = False):
        super().__init__(host, port, force_drop)
        self.databases: dict[str, dict[str, dict]] = {}
        self.cursors: list[FakeCursor] = []

    def connect(self, database_name: str) -> None:
        self._conn = object()
        Schema(database_name, self).update_schema_if_needed(self.force_drop)

    def close_connection(self) -> None:
        self._require_connection()
        self._conn = None

    def create_database_if_not_exists(self, name):
        self._require_connection()
        self.databases.setdefault(name, {})

    def create_table_if_not_exists(self, database_name, table_name):
        self._require_connection()
        self.databases[database_name].setdefault(table_name, {})

    def drop_database_if_exists(self, name):
        self._require_connection()
        self.databases.pop(name, None)

    def drop_table_if_exists(self, database_name, table_name):
        self._require_connection()
        self.databases.get(database_name, {}).pop(table_name, None)

    def _table(self, database_name, table_name) -> dict:
        return self.databases[database_name][table_name]

    @staticmethod
    def _matches(row, predicate) -> bool:
        return all(row.get(k) == v for k, v in predicate.items())

    def insert(self, database_name, table_name, obj):
        self._require_connection()
        row = obj if isinstance(obj, dict) else dataclasses.asdict(obj)
        table = self._table(database_name, table_name)
        replaced = row["id"] in table
        table[row["id"]] = dict(row)
        return {"inserted": 0 if replaced else 1, "replaced": 1 if replaced else 0, "errors": 0}

    def update(self, database_name, table_name, predicate, patch, **options):
        self._require_connection()
        replaced = 0
        for row in self._table(database_name, table_name).values():
            if self._matches(row, predicate):
                row.update(patch)
                replaced += 1
        return {"replaced": replaced, "errors": 0}

    def delete(self, database_name, table_name, predicate):
        self._require_connection()
        table = self._table(database_name, table_name)
        doomed = [key for key, row in table.items() if self._matches(row, predicate)]
        for key in doomed:
            del table[key]
        return {"deleted": len(doomed), "errors": 0}

    def query(self, database_name, table_name, builder):
        self._require_connection()
        rows = [dict(row) for row in self._table(database_name, table_name).values()]
        cursor = FakeCursor(builder(rows))
        self.cursors.append(cursor)
        return cursor


# =============================================================================
# Driver Fixtures
# =============================================================================


@pytest.fixture
def mock_r():
    """Replace the module-level rethinkdb handle in samplerepo.db."""
    with patch("samplerepo.db.r") as r:
        yield r


@pytest.fixture
def connected_database(mock_r) -> DatabaseRepository:
    """
    A DatabaseRepository connected through the mocked driver.

    Calls made while connecting are cleared so tests only see their own.
    """
    database = DatabaseRepository("localhost", 28015)
    database.connect("dev_sampleDB")
    mock_r.reset_mock()
    return database


@pytest.fixture
def table(mock_r) -> MagicMock:
    """The mocked `r.db(...).table(...)` term."""
    return mock_r.db.return_value.table.return_value


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def memory_database() -> InMemoryDatabaseRepository:
    """A connected in-memory database with the dev schema in place."""
    database = InMemoryDatabaseRepository(force_drop=True)
    database.connect("dev_sampleDB")
    return database


@pytest.fixture
def sample_entity_repo(memory_database):
    """Provide a SampleEntityRepository over the in-memory database."""
    from samplerepo.entity import SampleEntityRepository

    return SampleEntityRepository(memory_database, "dev_sampleDB")


@pytest.fixture
def make_memory_database():
    """
    Factory for unconnected in-memory databases, matching the
    DatabaseRepository constructor. Every instance built is kept in
    `make_memory_database.created`.
    """
    created = []

    def factory(host: str = "localhost", port: int = 28015, force_drop: bool = False):
        database = InMemoryDatabaseRepository(host, port, force_drop)
        created.append(database)
        return database

    factory.created = created
    return factory
