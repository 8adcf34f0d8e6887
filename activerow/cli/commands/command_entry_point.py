##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Defines the abstract base class for ActiveRow CLI commands.

Every command adds its own parser to the main `ArgumentParser` and handles the
parsed arguments in `process_command`.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace

from activerow.db.context import DatabaseContext


class CommandEntryPoint(ABC):
    """
    Abstract base class for an ActiveRow CLI command entry point.

    Methods:
        add_parser: Adds the parser for a specific command to the main `ArgumentParser`.
        process_command: Executes the logic for this CLI command.
        open_context: Builds a database context from the `--config` argument.
    """

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """Add the parser for this command to the main `ArgumentParser`."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Execute the logic for this CLI command."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `process_command` method.")

    @staticmethod
    def open_context(args: Namespace) -> DatabaseContext:
        """
        Build a database context from the configuration named on the command line.

        Args:
            args: Parsed CLI arguments.

        Returns:
            A new context. The caller closes it.
        """
        return DatabaseContext.from_config_file(getattr(args, "config", None))
