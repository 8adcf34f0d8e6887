##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
CLI module for printing the current timestamp of a database.

This is a quick way to check that a configured connection can be opened.
"""

import logging
from argparse import ArgumentParser, Namespace

from activerow.cli.commands.command_entry_point import CommandEntryPoint


LOG = logging.getLogger("activerow")


class TimestampCommand(CommandEntryPoint):
    """
    Handles the `timestamp` CLI command.

    Methods:
        add_parser: Adds the `timestamp` command to the CLI parser.
        process_command: Prints the current timestamp of a connection.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `timestamp` command parser to the CLI argument parser.

        Args:
            subparsers: The subparsers object to which the `timestamp` command parser will be added.
        """
        timestamp: ArgumentParser = subparsers.add_parser(
            "timestamp",
            help="Print the current timestamp of a configured connection.",
        )
        timestamp.add_argument("name", type=str, help="The connection name.")
        timestamp.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print the current timestamp of a connection.

        Args:
            args: Parsed CLI arguments.
        """
        with self.open_context(args) as context:
            executor = context.get_connection(args.name)
            LOG.debug(f"Connected to {executor.get_name()} {executor.get_version()}.")
            print(executor.current_timestamp())
