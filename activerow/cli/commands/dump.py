##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
CLI module for printing the rows of a table.

The `dump` command selects rows through the executor of a configured
connection, optionally restricted to some columns and filtered on column values,
and prints them as a table.
"""

import logging
from argparse import ArgumentParser, Namespace
from typing import Dict, List

from tabulate import tabulate

from activerow.cli.commands.command_entry_point import CommandEntryPoint
from activerow.exceptions import InvalidArgumentError


LOG = logging.getLogger("activerow")


def parse_filters(terms: List[str]) -> Dict:
    """
    Parse `COLUMN=VALUE` terms into a column filter.

    A column given more than once matches any of its values.

    Args:
        terms: The terms from the command line.

    Returns:
        A mapping of columns to a value or a list of values.

    Raises:
        InvalidArgumentError: If a term has no `=` or no column name.
    """
    filters = {}
    for term in terms or []:
        col, sep, value = term.partition("=")
        if not sep or not col:
            raise InvalidArgumentError(f"Filter '{term}' must look like COLUMN=VALUE")
        if col in filters:
            previous = filters[col]
            filters[col] = (previous if isinstance(previous, list) else [previous]) + [value]
        else:
            filters[col] = value
    return filters


class DumpCommand(CommandEntryPoint):
    """
    Handles the `dump` CLI command.

    Methods:
        add_parser: Adds the `dump` command to the CLI parser.
        process_command: Prints the selected rows of a table.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `dump` command parser to the CLI argument parser.

        Args:
            subparsers: The subparsers object to which the `dump` command parser will be added.
        """
        dump: ArgumentParser = subparsers.add_parser(
            "dump",
            help="Print the rows of a table.",
        )
        dump.add_argument("name", type=str, help="The connection name.")
        dump.add_argument("table", type=str, help="The table to read.")
        dump.add_argument(
            "-c",
            "--columns",
            type=str,
            nargs="+",
            default=None,
            help="The columns to print. [Default: every column]",
        )
        dump.add_argument(
            "-w",
            "--where",
            type=str,
            nargs="+",
            default=None,
            help="Filters as COLUMN=VALUE. Repeating a column matches any of its values.",
        )
        dump.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print the rows of a table.

        Args:
            args: Parsed CLI arguments.
        """
        where = parse_filters(args.where)
        with self.open_context(args) as context:
            rows = context.get_connection(args.name).select(args.table, args.columns or [], where or None)

        if not rows:
            LOG.info(f"No rows found in '{args.table}'.")
            return
        print(tabulate(rows, headers="keys"))
