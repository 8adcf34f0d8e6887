##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
The `cli` package contains the command line interface of ActiveRow.

Modules:
    argparse_main.py: Builds the main argument parser.

Subpackages:
    commands: One module per CLI command.
"""
