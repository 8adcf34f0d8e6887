##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
import os
from glob import glob


#######################################
# Loading in Module Specific Fixtures #
#######################################

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")
pytest_plugins = [
    f"tests.fixtures.{os.path.splitext(os.path.basename(fixture_file))[0]}"
    for fixture_file in sorted(glob(os.path.join(FIXTURES_DIR, "*.py")))
    if not fixture_file.endswith("__init__.py")
]
