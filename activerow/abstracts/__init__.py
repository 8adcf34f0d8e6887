##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
The `abstracts` package contains abstract base classes shared across ActiveRow.

Modules:
    factory: Contains `ActiveRowBaseFactory`, used to manage pluggable components.
"""

from activerow.abstracts.factory import ActiveRowBaseFactory


__all__ = ["ActiveRowBaseFactory"]
