##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module defines `DatabaseContext`, the object every model is attached to.

A context owns one `ConnectionRegistry` and one `InstanceRegistry`. Create one
per request, per worker or per test, and close it when done:

    with DatabaseContext.from_config_file() as context:
        widget = Widget(context, 1)
"""

import logging
from types import TracebackType
from typing import Any, Optional, Type

from activerow.config import Config
from activerow.config.configfile import get_config
from activerow.db.connection_registry import ConnectionRegistry
from activerow.db.instance_registry import InstanceRegistry
from activerow.executors.executor_base import StorageExecutor


LOG = logging.getLogger(__name__)


class DatabaseContext:
    """
    Holds the registries shared by the models of one unit of work.

    Attributes:
        connections (ConnectionRegistry): The named storage executors.
        instances (InstanceRegistry): The identity map of loaded models.

    Methods:
        from_config_file: Build a context from a YAML configuration file.
        get_connection: Return the executor for a connection name.
        get_instance: Return the live model for a row.
        close: Close every connection and empty the identity map.
    """

    def __init__(self, config: Config = None, connections: ConnectionRegistry = None):
        """
        Initialize the context.

        Args:
            config: The configuration supplying connection settings.
            connections: A prepared connection registry, used instead of `config`.
        """
        self.connections: ConnectionRegistry = connections if connections is not None else ConnectionRegistry(config)
        self.instances: InstanceRegistry = InstanceRegistry()

    @classmethod
    def from_config_file(cls, path: Optional[str] = None) -> "DatabaseContext":
        """
        Build a context from a YAML configuration file.

        Args:
            path: The file, or a directory holding `activerow.yaml`. The default
                locations are searched when omitted.

        Returns:
            A new context.
        """
        return cls(get_config(path))

    def get_connection(self, name: str = "default") -> StorageExecutor:
        """
        Return the executor for a connection name.

        Args:
            name: The connection name.

        Returns:
            The executor for `name`.
        """
        return self.connections.get_connection(name)

    def get_instance(self, model_class: Type, where: Any):
        """
        Return the live model for a row, loading it if needed.

        Args:
            model_class: The model class to look up.
            where: A primary key value, tuple, or column filter.

        Returns:
            The model, or None if no row matched.
        """
        return self.instances.get_instance(model_class, where, self)

    def close(self):
        """
        Close every connection and empty the identity map.
        """
        LOG.debug("Closing database context.")
        self.instances.clear()
        self.connections.close()

    def __enter__(self) -> "DatabaseContext":
        return self

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        self.close()
