##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Executor factory for selecting and instantiating storage executors in ActiveRow.

This module defines the `ExecutorFactory` class, which maps the `database_type`
setting of a connection to a `StorageExecutor` implementation. SQLite is served by
the stdlib `sqlite3` executor; server engines go through SQLAlchemy. Third-party
executors can be added under the `activerow.executors` entry point group.
"""

from typing import Any, Type

from activerow.abstracts import ActiveRowBaseFactory
from activerow.exceptions import ExecutorNotSupportedError
from activerow.executors.executor_base import StorageExecutor
from activerow.executors.sqlalchemy_executor import SQLAlchemyExecutor
from activerow.executors.sqlite.sqlite_executor import SQLiteExecutor


class ExecutorFactory(ActiveRowBaseFactory):
    """
    Factory class for managing and instantiating supported storage executors.

    Attributes:
        _registry (Dict[str, StorageExecutor]): Maps canonical executor names to executor classes.
        _aliases (Dict[str, str]): Maps engine names used in config files to canonical executor names.

    Methods:
        register: Register a new executor class and optional aliases.
        list_available: Return a list of supported executor names.
        create: Instantiate an executor class by name or alias.
        get_component_info: Return metadata about a registered executor.
    """

    def _register_builtins(self):
        """
        Register built-in executor implementations.
        """
        self.register("sqlite", SQLiteExecutor, aliases=["sqlite3"])
        self.register(
            "sqlalchemy",
            SQLAlchemyExecutor,
            aliases=["mysql", "mariadb", "pgsql", "postgres", "postgresql", "mssql", "sqlserver", "oracle"],
        )

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of StorageExecutor.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass StorageExecutor.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, StorageExecutor):
            raise TypeError(f"{component_class} must inherit from StorageExecutor")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering executor plugins.

        Returns:
            The entry point namespace for ActiveRow executor plugins.
        """
        return "activerow.executors"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Raise an appropriate exception for unsupported executors.

        Args:
            msg: The message to add to the error being raised.
        """
        raise ExecutorNotSupportedError(msg)


executor_factory = ExecutorFactory()
