##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module defines `ConnectionRegistry`, the cache of named storage executors.

Executors are created lazily from the configuration the first time a name is
requested and reused until the registry is closed.
"""

import logging
import threading
from typing import Dict, List

from activerow.config import Config
from activerow.executors.executor_base import StorageExecutor
from activerow.executors.executor_factory import ExecutorFactory, executor_factory


LOG = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    Cache of storage executors, one per configured connection name.

    Attributes:
        config (Config): The configuration supplying connection settings.
        factory (ExecutorFactory): The factory building executors.

    Methods:
        get_connection: Return the executor for a connection name, creating it if needed.
        register: Install an already-built executor under a name.
        names: List the names with an open executor.
        close: Close every executor and forget them.
    """

    def __init__(self, config: Config = None, factory: ExecutorFactory = None):
        """
        Initialize the registry.

        Args:
            config: The configuration supplying connection settings.
            factory: The factory building executors. Defaults to the shared `executor_factory`.
        """
        self.config: Config = config if config is not None else Config()
        self.factory: ExecutorFactory = factory if factory is not None else executor_factory
        self._connections: Dict[str, StorageExecutor] = {}
        self._lock = threading.RLock()

    def get_connection(self, name: str = "default") -> StorageExecutor:
        """
        Return the executor for a connection name, creating it if needed.

        Args:
            name: The connection name, a key of the configuration's `databases` section.

        Returns:
            The executor for `name`.

        Raises:
            ConnectionNotConfiguredError: If `name` is not configured.
            ExecutorNotSupportedError: If the configured `database_type` is unknown.
        """
        with self._lock:
            executor = self._connections.get(name)
            if executor is None:
                params = self.config.get_connection_params(name)
                executor_type = params["database_type"]
                LOG.debug(f"Creating '{executor_type}' connection '{name}'.")
                executor = self.factory.create(executor_type, params)
                self._connections[name] = executor
            return executor

    def register(self, name: str, executor: StorageExecutor):
        """
        Install an already-built executor under a name.

        Args:
            name: The connection name.
            executor: The executor to use for `name`.
        """
        with self._lock:
            self._connections[name] = executor

    def names(self) -> List[str]:
        """
        List the names with an open executor.

        Returns:
            The connection names created so far.
        """
        with self._lock:
            return list(self._connections)

    def close(self):
        """
        Close every executor and forget them.
        """
        with self._lock:
            for name, executor in self._connections.items():
                LOG.debug(f"Closing connection '{name}'.")
                executor.close()
            self._connections.clear()
