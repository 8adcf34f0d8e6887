##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
The `sqlite` package contains the stdlib `sqlite3` storage executor.

Modules:
    sqlite_connection.py: Opens configured `sqlite3` connections.
    sqlite_executor.py: Implements `StorageExecutor` on top of one connection.
"""
