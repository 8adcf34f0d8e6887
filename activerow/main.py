##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Main entry point into ActiveRow's command line.
"""

import logging
import sys
import traceback

from activerow.cli.argparse_main import build_main_parser
from activerow.exceptions import ActiveRowError
from activerow.log_formatter import setup_logging


LOG = logging.getLogger("activerow")


def main():
    """
    Entry point for the ActiveRow command-line interface (CLI).

    Prints the help when no argument is given. Otherwise sets up logging and runs
    the selected command. ActiveRow errors (bad configuration, unknown columns,
    ...) are reported by message; any other exception also names its type. Both
    exit with code 1.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    setup_logging(logger=LOG, log_level=args.level.upper(), colors=not args.no_color)

    try:
        args.func(args)
    except ActiveRowError as excpt:
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)
    # Top of the program stack: anything else is reported, not raised
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(f"{type(excpt).__name__}: {excpt}")
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
