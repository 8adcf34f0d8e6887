##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
ActiveRow: an active-record object-relational mapper.

Each `Model` subclass maps to one table and each instance to one row. Writes are
buffered as pending changes and committed by `save()` or `update()`.
"""

import sys


__version__ = "1.0.0"
VERSION = __version__

CLI_MOD = "activerow.main"


def is_using_cli():
    """
    Checks whether the activerow module is currently using the CLI.
    """
    return CLI_MOD in sys.modules
