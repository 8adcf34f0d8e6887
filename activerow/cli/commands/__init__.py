##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
ActiveRow CLI Commands Package.

Each module encapsulates the logic and argument parsing for one command,
following the `CommandEntryPoint` interface.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    connections: Implements the `connections` command listing the configured connections.
    dump: Implements the `dump` command printing the rows of a table.
    timestamp: Implements the `timestamp` command printing a database's current timestamp.
"""

from activerow.cli.commands.connections import ConnectionsCommand
from activerow.cli.commands.dump import DumpCommand
from activerow.cli.commands.timestamp import TimestampCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    ConnectionsCommand(),
    DumpCommand(),
    TimestampCommand(),
]
