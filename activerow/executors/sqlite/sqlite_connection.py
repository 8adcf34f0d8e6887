##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
SQLite connection handling for ActiveRow.

This module defines the `SQLiteConnection` class, which opens SQLite connections
with a consistent configuration (autocommit, foreign key enforcement, WAL mode for
file databases, name-based row access). It can be used as a context manager or
held open by an executor through `open()` and `close()`.
"""

import logging
import sqlite3
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type


LOG = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class SQLiteConnection:
    """
    Opens and safely closes a configured SQLite database connection.

    Attributes:
        db_path (str): The path to the database file, or `:memory:`.
        conn (sqlite3.Connection): The active SQLite connection, if open.

    Methods:
        open: Open and configure the connection.
        close: Close the connection if it is open.
        __enter__: Opens the connection when entering a context.
        __exit__: Closes the connection when exiting a context.
    """

    def __init__(self, db_path: str = MEMORY_DATABASE):
        """
        Initialize the SQLiteConnection.

        Args:
            db_path: The path to the database file, or `:memory:`.
        """
        self.db_path: str = db_path
        self.conn: Optional[sqlite3.Connection] = None

    @property
    def is_memory(self) -> bool:
        """True if the connection targets an in-memory database."""
        return self.db_path == MEMORY_DATABASE or self.db_path.startswith("file::memory:")

    def open(self) -> sqlite3.Connection:
        """
        Open and configure the SQLite connection.

        Returns:
            A sqlite connection.
        """
        if self.conn is not None:
            return self.conn

        if not self.is_memory and not self.db_path.startswith("file:"):
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        connection_kwargs = {"check_same_thread": False, "uri": self.db_path.startswith("file:")}
        if sys.version_info < (3, 12):  # Autocommit wasn't added until python 3.12
            connection_kwargs["isolation_level"] = None
        else:
            connection_kwargs["autocommit"] = True

        LOG.debug(f"Opening SQLite connection to '{self.db_path}'.")
        self.conn = sqlite3.connect(self.db_path, **connection_kwargs)

        if not self.is_memory:
            # Enable WAL mode for better concurrent access
            self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")

        # This enables name-based access to columns
        self.conn.row_factory = sqlite3.Row

        return self.conn

    def close(self):
        """
        Close the connection if it is open.
        """
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> sqlite3.Connection:
        """
        Enters the runtime context related to this object and opens a sqlite connection.

        Returns:
            A sqlite connection.
        """
        return self.open()

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        """
        Exits the runtime context and closes the connection.

        Args:
            exc_type: The exception type raised, if any.
            exc_value: The exception instance raised, if any.
            traceback: The traceback object, if an exception was raised.
        """
        self.close()
