##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
SQLAlchemy Core implementation of the `StorageExecutor` interface.

`SQLAlchemyExecutor` reaches server databases (MySQL, MariaDB, PostgreSQL, SQL
Server, Oracle) as well as SQLite through one SQLAlchemy engine per connection.
Statements are built with lightweight `table()`/`column()` constructs, so no
schema reflection happens. The DBAPI driver for the chosen engine must be
installed separately.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import column, create_engine, delete, false, insert, select, table, text, update
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from activerow.exceptions import ExecutorNotSupportedError, InvalidArgumentError
from activerow.executors.executor_base import StatementResult, StorageExecutor
from activerow.executors.where import OP_IN, OP_IS_NULL, OP_NEVER, iter_filter_terms


LOG = logging.getLogger(__name__)

# Engine names accepted in the `database_type` setting, mapped to SQLAlchemy dialects
DIALECTS = {
    "mysql": "mysql",
    "mariadb": "mariadb",
    "pgsql": "postgresql",
    "postgres": "postgresql",
    "postgresql": "postgresql",
    "mssql": "mssql",
    "sqlserver": "mssql",
    "oracle": "oracle",
    "sqlite": "sqlite",
}


def build_url(  # pylint: disable=too-many-arguments
    database_type: str,
    database_name: str,
    server: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    port: Optional[int] = None,
    charset: Optional[str] = None,
) -> URL:
    """
    Build a SQLAlchemy URL from connection settings.

    Args:
        database_type: The engine kind (e.g. "mysql", "pgsql").
        database_name: The database to use on the server.
        server: The host name of the server.
        username: The user to authenticate as.
        password: The user's password.
        port: The server port.
        charset: The connection character set, passed as a query argument.

    Returns:
        The URL for `create_engine`.

    Raises:
        ExecutorNotSupportedError: If `database_type` is unknown.
    """
    dialect = DIALECTS.get(str(database_type).lower())
    if dialect is None:
        raise ExecutorNotSupportedError(f"Database type '{database_type}' is not supported by SQLAlchemyExecutor")

    if dialect == "sqlite":
        return URL.create("sqlite", database=database_name)

    query = {"charset": charset} if charset else {}
    return URL.create(
        dialect,
        username=username,
        password=password,
        host=server,
        port=int(port) if port else None,
        database=database_name,
        query=query,
    )


class SQLAlchemyExecutor(StorageExecutor):
    """
    A SQLAlchemy Core implementation of the `StorageExecutor` interface.

    Attributes:
        executor_name (str): The dialect name of the engine (e.g. "mysql").
        engine (Engine): The SQLAlchemy engine.

    Methods:
        get_version: Query the server for its version.
        get: Fetch the first row matching a filter.
        select: Fetch every row matching a filter.
        insert: Insert one row.
        update: Update the rows matching a filter.
        delete: Delete the rows matching a filter.
        query: Run a raw statement and return its rows.
        close: Dispose of the engine.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        database_type: str = "sqlite",
        database_name: str = None,
        server: str = None,
        username: str = None,
        password: str = None,
        port: int = None,
        charset: str = None,
        url: str = None,
        engine: Engine = None,
    ):
        """
        Initialize the executor and create its engine.

        Args:
            database_type: The engine kind (e.g. "mysql", "pgsql").
            database_name: The database to use on the server.
            server: The host name of the server.
            username: The user to authenticate as.
            password: The user's password.
            port: The server port.
            charset: The connection character set.
            url: A complete SQLAlchemy URL, used instead of the individual settings.
            engine: An existing engine, used instead of creating one.
        """
        if engine is None:
            if url is None:
                url = build_url(database_type, database_name, server, username, password, port, charset)
            engine = create_engine(url)
        super().__init__(engine.dialect.name)
        self.engine: Engine = engine

    def get_version(self) -> str:
        """
        Query the server for its version.

        Returns:
            The server version as dotted text.
        """
        with self.engine.connect() as conn:
            info = conn.dialect.server_version_info or ()
        return ".".join(str(part) for part in info)

    @staticmethod
    def _table(name: str, columns: Sequence[str], where: Optional[Mapping] = None):
        names = list(dict.fromkeys(list(columns) + list(where or {})))
        return table(name, *(column(col) for col in names))

    @staticmethod
    def _conditions(tbl, where: Optional[Mapping]) -> List[Any]:
        conditions = []
        for col, operator, value in iter_filter_terms(where):
            target = tbl.c[col]
            if operator == OP_IS_NULL:
                conditions.append(target.is_(None))
            elif operator == OP_NEVER:
                conditions.append(false())
            elif operator == OP_IN:
                conditions.append(target.in_(value))
            else:
                conditions.append(target == value)
        return conditions

    def _select(self, table_name: str, columns: Sequence[str], where: Optional[Mapping]):
        tbl = self._table(table_name, columns, where)
        stmt = select(*(tbl.c[col] for col in columns)) if columns else select(text("*")).select_from(tbl)
        conditions = self._conditions(tbl, where)
        return stmt.where(*conditions) if conditions else stmt

    def get(self, table: str, columns: Sequence[str], where: Optional[Mapping] = None) -> Optional[Dict[str, Any]]:
        """
        Fetch the first row of `table` matching `where`.

        Args:
            table: The table to read.
            columns: The columns to fetch.
            where: The filter to apply.

        Returns:
            The row as a dictionary, or None if nothing matched.
        """
        stmt = self._select(table, columns, where).limit(1)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def select(self, table: str, columns: Sequence[str], where: Optional[Mapping] = None) -> List[Dict[str, Any]]:
        """
        Fetch every row of `table` matching `where`.

        Args:
            table: The table to read.
            columns: The columns to fetch.
            where: The filter to apply. None selects every row.

        Returns:
            A list of rows as dictionaries.
        """
        stmt = self._select(table, columns, where)
        with self.engine.connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings().all()]

    def _execute_write(self, stmt, returning_id: bool = False) -> StatementResult:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                if returning_id:
                    last_insert_id = result.scalar()
                    affected = 1
                else:
                    last_insert_id = getattr(result, "lastrowid", None) if result.is_insert else None
                    affected = result.rowcount
        except SQLAlchemyError as exc:
            LOG.error(f"SQLAlchemy statement failed: {exc}")
            return StatementResult(ok=False)
        return StatementResult(ok=True, affected=affected, last_insert_id=last_insert_id)

    def insert(self, table: str, row: Mapping, id_column: Optional[str] = None) -> StatementResult:
        """
        Insert one row into `table`.

        Args:
            table: The table to write.
            row: A mapping of columns to values.
            id_column: The column generated by the database. On engines supporting
                `INSERT ... RETURNING` its value is returned as the last inserted id.

        Returns:
            The outcome of the statement, with the generated id if any.
        """
        columns = list(row) + ([id_column] if id_column and id_column not in row else [])
        tbl = self._table(table, columns)
        stmt = insert(tbl).values(dict(row)) if row else insert(tbl)

        returning_id = bool(id_column) and self.engine.dialect.insert_returning and self.engine.dialect.name != "sqlite"
        if returning_id:
            stmt = stmt.returning(tbl.c[id_column])
        return self._execute_write(stmt, returning_id=returning_id)

    def update(self, table: str, row: Mapping, where: Mapping) -> StatementResult:
        """
        Update the rows of `table` matching `where`.

        Args:
            table: The table to write.
            row: A mapping of columns to new values. An empty mapping is a no-op.
            where: The filter selecting the rows to update.

        Returns:
            The outcome of the statement.
        """
        if not row:
            return StatementResult(ok=True, affected=0)

        tbl = self._table(table, list(row), where)
        stmt = update(tbl).values(dict(row))
        conditions = self._conditions(tbl, where)
        if conditions:
            stmt = stmt.where(*conditions)
        return self._execute_write(stmt)

    def delete(self, table: str, where: Mapping) -> StatementResult:
        """
        Delete the rows of `table` matching `where`.

        Args:
            table: The table to write.
            where: The filter selecting the rows to delete.

        Returns:
            The outcome of the statement.

        Raises:
            InvalidArgumentError: If `where` is empty.
        """
        if not where:
            raise InvalidArgumentError(f"Refusing to delete from '{table}' without a filter")

        tbl = self._table(table, [], where)
        stmt = delete(tbl).where(*self._conditions(tbl, where))
        return self._execute_write(stmt)

    def query(self, statement: str, params: Any = None) -> List[Tuple]:
        """
        Run a raw statement and return its rows.

        Args:
            statement: The SQL text to run.
            params: A mapping of named parameters.

        Returns:
            The result rows as tuples.
        """
        with self.engine.connect() as conn:
            result = conn.execute(text(statement), params or {})
            return [tuple(row) for row in result.fetchall()]

    def close(self):
        """
        Dispose of the engine and its connection pool.
        """
        self.engine.dispose()
