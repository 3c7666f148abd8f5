"""
RethinkDB connection and query utilities.

DatabaseRepository is a thin wrapper over the rethinkdb driver's query
builder: it owns one connection, exposes database/table/index lifecycle
helpers, filter-based CRUD primitives, and change-feed subscriptions.

Nothing here retries, pools or caches. Driver errors (ReqlError and its
subclasses) propagate unchanged to the caller.

Usage:
    database = DatabaseRepository("localhost", 28015, force_drop=True)
    database.connect("dev_sampleDB")
    database.insert("dev_sampleDB", "SampleEntity", {"id": 1, "text": "jeden"})
"""

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from rethinkdb import RethinkDB

from samplerepo.exceptions import ConnectionNotEstablishedError

r = RethinkDB()


# =============================================================================
# Change Feed Subscriptions
# =============================================================================


@dataclass(frozen=True)
class ChangeFeedResult:
    """Outcome of a change-feed subscription, available once it has ended."""

    changes: int
    error: Optional[Exception] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class ChangeSubscription:
    """
    Handle for a running change feed.

    The cursor is drained on a daemon thread; `callback` is invoked once per
    change record. The subscription ends when stop() is called, when the
    cursor is exhausted, or on the first error raised by the cursor or the
    callback. Errors are reported through result() and never raised on the
    feed thread.
    """

    def __init__(self, cursor, callback: Callable[[dict], Any], connection=None, name: str = "changefeed"):
        self._cursor = cursor
        self._callback = callback
        self._connection = connection
        self._stopped = threading.Event()
        self._result: Optional[ChangeFeedResult] = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "ChangeSubscription":
        self._thread.start()
        return self

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def stop(self, timeout: Optional[float] = None) -> ChangeFeedResult:
        """
        Cancel the subscription and wait for the feed thread to finish.

        Closing the feed's connection interrupts the blocking cursor read;
        the resulting driver error is treated as cancellation.
        """
        self._stopped.set()
        self._close()
        return self.result(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def result(self, timeout: Optional[float] = None) -> ChangeFeedResult:
        """
        Wait for the subscription to end and return its outcome.

        Raises:
            TimeoutError: if the feed is still running after `timeout` seconds
        """
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TimeoutError("Change feed is still running")
        return self._result

    def _run(self) -> None:
        delivered = 0
        error = None
        try:
            for change in self._cursor:
                if self._stopped.is_set():
                    break
                self._callback(change)
                delivered += 1
        except Exception as e:
            if not self._stopped.is_set():
                error = e
        try:
            self._close()
        except Exception as e:
            error = error or e
        self._result = ChangeFeedResult(
            changes=delivered,
            error=error,
            cancelled=self._stopped.is_set(),
        )

    def _close(self) -> None:
        if self._connection is not None:
            self._connection.close(noreply_wait=False)
        else:
            self._cursor.close()

    def __enter__(self) -> "ChangeSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


# =============================================================================
# Database Repository
# =============================================================================


class DatabaseRepository:
    """
    Owns a single RethinkDB connection and runs queries against it.

    `host` and `port` are fixed at construction. `force_drop` is read once by
    connect() to decide whether the schema is recreated from scratch.
    """

    def __init__(self, host: str, port: int, force_drop: bool = False):
        self._host = host
        self._port = port
        self.force_drop = force_drop
        self._conn = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def _require_connection(self):
        if self._conn is None:
            raise ConnectionNotEstablishedError()
        return self._conn

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    def connect(self, database_name: str) -> None:
        """
        Open the connection and bring the schema for `database_name` up to date.

        Args:
            database_name: Database holding the entity tables
        """
        from samplerepo.schema import Schema

        self._conn = r.connect(host=self._host, port=self._port)
        Schema(database_name, self).update_schema_if_needed(self.force_drop)

    def close_connection(self) -> None:
        conn = self._require_connection()
        conn.close()
        self._conn = None

    def __enter__(self) -> "DatabaseRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._conn is not None:
            self.close_connection()

    # -------------------------------------------------------------------------
    # Databases, tables and indexes
    #
    # These helpers list first and act second. Two writers racing on the same
    # name can both see it missing; the loser gets a ReqlOpFailedError.
    # -------------------------------------------------------------------------

    def create_database_if_not_exists(self, name: str) -> None:
        conn = self._require_connection()
        if name in r.db_list().run(conn):
            return
        r.db_create(name).run(conn)

    def create_table_if_not_exists(self, database_name: str, table_name: str) -> None:
        conn = self._require_connection()
        if table_name in r.db(database_name).table_list().run(conn):
            return
        r.db(database_name).table_create(table_name).run(conn)

    def drop_database_if_exists(self, name: str) -> None:
        conn = self._require_connection()
        if name in r.db_list().run(conn):
            r.db_drop(name).run(conn)

    def drop_table_if_exists(self, database_name: str, table_name: str) -> None:
        conn = self._require_connection()
        if database_name not in r.db_list().run(conn):
            return
        if table_name in r.db(database_name).table_list().run(conn):
            r.db(database_name).table_drop(table_name).run(conn)

    def create_index_if_not_exists(
        self,
        database_name: str,
        table_name: str,
        index_name: str,
        index_field: str,
    ) -> None:
        """
        Create a secondary index on a single field and wait until it is ready.

        Args:
            database_name: Database containing the table
            table_name: Table to index
            index_name: Name of the secondary index
            index_field: Row field the index is built from
        """
        conn = self._require_connection()
        table = r.db(database_name).table(table_name)
        if index_name in table.index_list().run(conn):
            return
        table.index_create(index_name, r.row[index_field]).run(conn)
        table.index_wait(index_name).run(conn)

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    def insert(self, database_name: str, table_name: str, obj: Any) -> dict:
        """
        Insert a row, replacing any existing row with the same primary key.

        Dataclass instances are stored as their field dict.

        Returns:
            The driver's write summary (inserted, replaced, errors, ...)
        """
        conn = self._require_connection()
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            obj = dataclasses.asdict(obj)
        return r.db(database_name).table(table_name).insert(obj, conflict="replace").run(conn)

    def update(
        self,
        database_name: str,
        table_name: str,
        predicate: Any,
        patch: Any,
        **options,
    ) -> dict:
        """
        Apply `patch` to every row matching `predicate`.

        Args:
            predicate: A dict of field values or a ReQL predicate function
            patch: Fields to merge into each matching row
            **options: Passed to the driver's update (durability, return_changes, non_atomic)

        Returns:
            The driver's write summary (replaced, unchanged, skipped, ...)
        """
        conn = self._require_connection()
        return (
            r.db(database_name)
            .table(table_name)
            .filter(predicate)
            .update(patch, **options)
            .run(conn)
        )

    def delete(self, database_name: str, table_name: str, predicate: Any) -> dict:
        """Delete every row matching `predicate` and return the write summary."""
        conn = self._require_connection()
        return r.db(database_name).table(table_name).filter(predicate).delete().run(conn)

    def query(self, database_name: str, table_name: str, builder: Callable[[Any], Any]):
        """
        Run a caller-built query against a table.

        `builder` receives the table term and returns the query to run. The raw
        result is returned as-is; sequences come back as a cursor the caller
        must close.

        Usage:
            cursor = database.query("dev_sampleDB", "SampleEntity", lambda table: table)
        """
        conn = self._require_connection()
        return builder(r.db(database_name).table(table_name)).run(conn)

    def changes(
        self,
        database_name: str,
        table_name: str,
        callback: Callable[[dict], Any],
    ) -> ChangeSubscription:
        """
        Subscribe to a table's change feed.

        The feed runs on its own connection so the main connection stays free
        for regular queries. `callback` receives each change record as a dict
        with `old_val` and `new_val` keys.

        Returns:
            A started ChangeSubscription; call stop() to cancel it
        """
        self._require_connection()
        feed_conn = r.connect(host=self._host, port=self._port)
        try:
            cursor = r.db(database_name).table(table_name).changes().run(feed_conn)
        except Exception:
            feed_conn.close(noreply_wait=False)
            raise
        return ChangeSubscription(
            cursor,
            callback,
            connection=feed_conn,
            name=f"changefeed-{database_name}.{table_name}",
        ).start()
