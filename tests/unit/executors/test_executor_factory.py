##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Tests for the `executor_factory.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from activerow.exceptions import ExecutorNotSupportedError
from activerow.executors.executor_factory import ExecutorFactory
from activerow.executors.sqlalchemy_executor import SQLAlchemyExecutor
from activerow.executors.sqlite.sqlite_executor import SQLiteExecutor


class TestExecutorFactory:
    """
    Tests for the `ExecutorFactory` class.
    """

    @pytest.fixture
    def factory(self, mocker: MockerFixture) -> ExecutorFactory:
        """
        An `ExecutorFactory` that discovers no plugins.

        Args:
            mocker: PyTest mocker fixture.

        Returns:
            A fresh factory.
        """
        mocker.patch("activerow.abstracts.factory.entry_points", return_value=[])
        return ExecutorFactory()

    def test_builtin_executors(self, factory: ExecutorFactory):
        """
        Test that the SQLite and SQLAlchemy executors are registered.

        Args:
            factory: A fresh `ExecutorFactory`.
        """
        assert sorted(factory.list_available()) == ["sqlalchemy", "sqlite"]

    @pytest.mark.parametrize("database_type", ["mysql", "mariadb", "pgsql", "postgresql", "mssql", "oracle"])
    def test_server_engines_use_sqlalchemy(self, factory: ExecutorFactory, database_type: str):
        """
        Test that server engine names resolve to the SQLAlchemy executor.

        Args:
            factory: A fresh `ExecutorFactory`.
            database_type: The engine name from the configuration.
        """
        assert factory.resolve_name(database_type) == "sqlalchemy"

    def test_create_sqlite(self, factory: ExecutorFactory):
        """
        Test that connection parameters are passed to the SQLite executor.

        Args:
            factory: A fresh `ExecutorFactory`.
        """
        executor = factory.create("sqlite3", {"database_type": "sqlite3", "database_name": ":memory:"})
        try:
            assert isinstance(executor, SQLiteExecutor)
        finally:
            executor.close()

    def test_create_sqlalchemy(self, factory: ExecutorFactory):
        """
        Test that the SQLAlchemy executor can be created from an explicit URL.

        Args:
            factory: A fresh `ExecutorFactory`.
        """
        executor = factory.create("sqlalchemy", {"url": "sqlite://"})
        try:
            assert isinstance(executor, SQLAlchemyExecutor)
        finally:
            executor.close()

    def test_unknown_executor(self, factory: ExecutorFactory):
        """
        Test that an unknown engine raises `ExecutorNotSupportedError`.

        Args:
            factory: A fresh `ExecutorFactory`.
        """
        with pytest.raises(ExecutorNotSupportedError, match="cassandra"):
            factory.create("cassandra")

    def test_only_storage_executors_can_register(self, factory: ExecutorFactory):
        """
        Test that registering a class that is not a `StorageExecutor` fails.

        Args:
            factory: A fresh `ExecutorFactory`.
        """
        with pytest.raises(TypeError):
            factory.register("dict", dict)
