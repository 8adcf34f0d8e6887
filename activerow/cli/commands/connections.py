##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
CLI module for listing the configured connections.

This module defines the `ConnectionsCommand` class, which handles the
`connections` subcommand. It prints one line per configured connection name
with the engine and database it points to. No connection is opened.
"""

import logging
from argparse import ArgumentParser, Namespace

from tabulate import tabulate

from activerow.cli.commands.command_entry_point import CommandEntryPoint
from activerow.config.configfile import get_config
from activerow.exceptions import ConnectionNotConfiguredError


LOG = logging.getLogger("activerow")


class ConnectionsCommand(CommandEntryPoint):
    """
    Handles the `connections` CLI command.

    Methods:
        add_parser: Adds the `connections` command to the CLI parser.
        process_command: Prints the configured connections.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `connections` command parser to the CLI argument parser.

        Args:
            subparsers: The subparsers object to which the `connections` command parser will be added.
        """
        connections: ArgumentParser = subparsers.add_parser(
            "connections",
            help="List the configured connection names.",
        )
        connections.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print the configured connections.

        Args:
            args: Parsed CLI arguments.
        """
        config = get_config(args.config)
        rows = []
        for name in config.connection_names():
            try:
                params = config.get_connection_params(name)
            except ConnectionNotConfiguredError as exc:
                LOG.warning(str(exc))
                continue
            rows.append([name, params["database_type"], params.get("server", ""), params["database_name"]])

        if not rows:
            LOG.info("No connections are configured.")
            return
        print(tabulate(rows, headers=["Name", "Type", "Server", "Database"]))
