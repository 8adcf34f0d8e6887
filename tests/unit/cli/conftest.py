##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Fixtures for files in this `cli/` test directory.
"""

import os
from argparse import ArgumentParser

import pytest
import yaml

from activerow.cli.commands.command_entry_point import CommandEntryPoint
from activerow.executors.sqlite.sqlite_executor import SQLiteExecutor
from tests.fixture_types import FixtureCallable, FixtureStr


@pytest.fixture
def create_parser() -> FixtureCallable:
    """
    A fixture to help create a parser for any command.

    Returns:
        A function that creates a parser.
    """

    def _create_parser(cmd: CommandEntryPoint) -> ArgumentParser:
        """
        Returns an `ArgumentParser` configured with the `cmd` command.

        Returns:
            Parser with the `cmd` command registered.
        """
        parser = ArgumentParser()
        parser.add_argument("--config", default=None)
        subparsers = parser.add_subparsers(dest="main_command")
        cmd.add_parser(subparsers)
        return parser

    return _create_parser


@pytest.fixture
def sqlite_file_config(tmp_path) -> FixtureStr:
    """
    Create a SQLite database file holding a small `people` table, and a
    configuration file whose "default" connection points to it.

    Args:
        tmp_path: PyTest temporary directory fixture.

    Returns:
        The path to the configuration file.
    """
    db_path = os.path.join(str(tmp_path), "people.db")
    executor = SQLiteExecutor(db_path)
    executor.conn.executescript("CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT, city TEXT);")
    for name, city in (("Ada", "London"), ("Grace", "New York"), ("Edsger", "Nuenen")):
        executor.insert("people", {"name": name, "city": city})
    executor.close()

    config_path = os.path.join(str(tmp_path), "activerow.yaml")
    config = {
        "servers": {"default": {"database_type": "sqlite"}},
        "databases": {"default": {"database_name": db_path}},
    }
    with open(config_path, "w") as config_file:
        yaml.dump(config, config_file)
    return config_path
