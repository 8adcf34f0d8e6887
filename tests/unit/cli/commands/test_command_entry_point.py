##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Tests for the `command_entry_point.py` file.
"""

from argparse import ArgumentParser, Namespace

import pytest
from pytest_mock import MockerFixture

from activerow.cli.commands.command_entry_point import CommandEntryPoint
from activerow.db.context import DatabaseContext
from tests.fixture_types import FixtureStr


class DummyCommand(CommandEntryPoint):
    """Minimal command used to exercise the base class."""

    def add_parser(self, subparsers: ArgumentParser):
        subparsers.add_parser("dummy").set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        return "processed"


def test_cannot_instantiate_abstract_class():
    """
    Test that `CommandEntryPoint` cannot be instantiated without its methods.
    """
    with pytest.raises(TypeError):
        CommandEntryPoint()  # pylint: disable=abstract-class-instantiated


def test_concrete_command(create_parser):
    """
    Test that a concrete command registers its parser and handler.

    Args:
        create_parser: A fixture that builds a parser around one command.
    """
    command = DummyCommand()
    args = create_parser(command).parse_args(["dummy"])
    assert args.func(args) == "processed"


def test_open_context(demo_config_file: FixtureStr):
    """
    Test that `open_context` builds a context from the `--config` argument.

    Args:
        demo_config_file: The path to a configuration file.
    """
    with CommandEntryPoint.open_context(Namespace(config=demo_config_file)) as context:
        assert isinstance(context, DatabaseContext)
        assert context.get_connection("default").get_name() == "sqlite"


def test_open_context_without_config(mocker: MockerFixture):
    """
    Test that `open_context` falls back to the default configuration search.

    Args:
        mocker: PyTest mocker fixture.
    """
    mock_from_file = mocker.patch.object(DatabaseContext, "from_config_file")

    CommandEntryPoint.open_context(Namespace())

    mock_from_file.assert_called_once_with(None)
