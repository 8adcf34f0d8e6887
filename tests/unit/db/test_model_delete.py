##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Tests for hard and soft deletion of `Model` instances.
"""

import re

import pytest

from activerow.db.model import Model
from activerow.db.schema import ModelSchema
from activerow.exceptions import ModelLogicError, ReadOnlyModelError
from activerow.executors.executor_base import StatementResult
from tests.example_models import Event, Membership, Setting, Toggle, Widget
from tests.fixture_types import FixtureContext, FixtureExecutor


# pylint: disable=redefined-outer-name

TIMESTAMP = "2024-05-06 07:08:09"


class FlagWidget(Model):
    """A widget whose soft delete mode is not supported."""

    schema = ModelSchema(
        table="widgets", columns=("id", "name", "deleted"), soft_delete="deleted", soft_delete_mode="flag"
    )


@pytest.fixture
def saved_toggle(sqlite_context: FixtureContext) -> Toggle:
    """
    An active toggle saved in the in-memory database.

    Args:
        sqlite_context: A database context over an in-memory SQLite database.

    Returns:
        The saved toggle.
    """
    toggle = Toggle(sqlite_context)
    toggle.set("name", "lights")
    assert toggle.save()
    return toggle


@pytest.fixture
def membership(sqlite_context: FixtureContext) -> Membership:
    """
    A membership saved in the in-memory database.

    Args:
        sqlite_context: A database context over an in-memory SQLite database.

    Returns:
        The saved membership.
    """
    member = Membership(sqlite_context)
    member.set_multiple({"group_name": "staff", "member": "ada"})
    assert member.save()
    return member


@pytest.fixture
def mocked_membership(mock_context: FixtureContext, mock_executor: FixtureExecutor) -> Membership:
    """
    A membership loaded through a mocked executor.

    Args:
        mock_context: A database context over a mocked executor.
        mock_executor: The mocked executor of `mock_context`.

    Returns:
        The loaded membership.
    """
    mock_executor.get.return_value = {"group_name": "staff", "member": "ada", "role": None}
    return Membership(mock_context, ("staff", "ada"))


class TestSoftDelete:
    """
    Tests for `delete` and `undelete` on soft-deletable models.
    """

    def test_active_mode(self, sqlite_executor: FixtureExecutor, saved_toggle: Toggle):
        """
        Test that the "active" mode clears the flag on delete and sets it back on undelete.

        Args:
            sqlite_executor: The executor of the in-memory database.
            saved_toggle: A saved toggle.
        """
        where = saved_toggle.get_primary_key()
        assert saved_toggle.get("active") == 1
        assert not saved_toggle.is_deleted

        assert saved_toggle.delete()
        assert sqlite_executor.get("toggles", ["active"], where) == {"active": 0}
        assert saved_toggle.is_deleted

        assert saved_toggle.undelete()
        assert sqlite_executor.get("toggles", ["active"], where) == {"active": 1}
        assert not saved_toggle.is_deleted

    def test_stamp_mode(self, sqlite_context: FixtureContext, sqlite_executor: FixtureExecutor):
        """
        Test that the "stamp" mode records the deletion time and clears it on undelete.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            sqlite_executor: The executor of the in-memory database.
        """
        event = Event(sqlite_context)
        event.set("title", "launch")
        assert event.save()
        where = event.get_primary_key()

        assert event.delete()
        removed_at = sqlite_executor.get("events", ["removed_at"], where)["removed_at"]
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", removed_at)
        assert event.is_deleted
        assert Event(sqlite_context, where).get("title") == "launch"

        assert event.undelete()
        assert sqlite_executor.get("events", ["removed_at"], where) == {"removed_at": None}
        assert not event.is_deleted

    def test_stamp_mode_shares_timestamp(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that the deletion stamp and the other stamp columns come from one
        timestamp fetch.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.get.return_value = {
            "id": 1,
            "title": "launch",
            "event_date": "2024-01-01",
            "event_time": "00:00:00",
            "recorded": "2024-01-01 00:00:00",
            "removed_at": None,
        }
        event = Event(mock_context, 1)

        assert event.delete()
        mock_executor.update.assert_called_once_with(
            "events",
            {"removed_at": TIMESTAMP, "event_date": "2024-05-06", "event_time": "07:08:09"},
            {"id": 1},
        )
        mock_executor.current_timestamp.assert_called_once()

    def test_delete_keeps_other_pending_changes(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that a soft delete only writes the soft delete column.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.get.return_value = {"id": 1, "name": "bolt", "deleted": 0}
        widget = Widget(mock_context, 1)
        widget.set("name", "nut")

        assert widget.delete()
        mock_executor.update.assert_called_once_with("widgets", {"deleted": 1}, {"id": 1})
        assert widget.pending == {"name": "nut"}

    def test_failed_soft_delete(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that a storage failure during a soft delete returns False.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.get.return_value = {"id": 1, "name": "bolt", "deleted": 0}
        mock_executor.update.return_value = StatementResult(ok=False)
        widget = Widget(mock_context, 1)

        assert not widget.delete()
        assert not widget.is_deleted

    def test_unknown_mode(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that an unsupported soft delete mode is reported.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.get.return_value = {"id": 1, "name": "bolt", "deleted": 0}
        widget = FlagWidget(mock_context, 1)

        with pytest.raises(ModelLogicError, match="flag"):
            widget.delete()
        with pytest.raises(ModelLogicError, match="flag"):
            widget.undelete()
        mock_executor.update.assert_not_called()

    def test_undelete_hard_deletable_model(self, mocked_membership: Membership):
        """
        Test that only soft-deletable models can be undeleted.

        Args:
            mocked_membership: A loaded membership.
        """
        with pytest.raises(ModelLogicError):
            mocked_membership.undelete()
        with pytest.raises(ModelLogicError):
            _ = mocked_membership.is_deleted

    def test_undelete_fresh_model(self, mock_context: FixtureContext):
        """
        Test that a fresh model cannot be undeleted.

        Args:
            mock_context: A database context over a mocked executor.
        """
        with pytest.raises(ModelLogicError):
            Widget(mock_context).undelete()


class TestHardDelete:
    """
    Tests for `delete` on models without a soft delete column.
    """

    def test_delete(self, sqlite_context: FixtureContext, sqlite_executor: FixtureExecutor, membership: Membership):
        """
        Test that deleting removes the row, unregisters the model and makes it fresh.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            sqlite_executor: The executor of the in-memory database.
            membership: A saved membership.
        """
        assert membership in sqlite_context.instances

        assert membership.delete()

        assert sqlite_executor.select("memberships", ["member"]) == []
        assert sqlite_context.instances.get(Membership, ("staff", "ada")) is None
        assert membership.is_fresh
        assert membership.pending == {}

    def test_delete_missing_row(self, mocked_membership: Membership, mock_executor: FixtureExecutor):
        """
        Test that deleting a row that is already gone returns False.

        Args:
            mocked_membership: A loaded membership.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.delete.return_value = StatementResult(ok=True, affected=0)

        assert not mocked_membership.delete()
        mock_executor.delete.assert_called_once_with("memberships", {"group_name": "staff", "member": "ada"})

    def test_failed_delete_keeps_state(
        self, mock_context: FixtureContext, mocked_membership: Membership, mock_executor: FixtureExecutor
    ):
        """
        Test that a storage failure leaves the model loaded and registered.

        Args:
            mock_context: A database context over a mocked executor.
            mocked_membership: A loaded membership.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.delete.return_value = StatementResult(ok=False)

        assert not mocked_membership.delete()
        assert not mocked_membership.is_fresh
        assert mock_context.instances.get(Membership, ("staff", "ada")) is mocked_membership

    def test_delete_fresh_model(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that a fresh model cannot be deleted.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        with pytest.raises(ModelLogicError):
            Membership(mock_context).delete()
        mock_executor.delete.assert_not_called()

    def test_read_only(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that read-only models cannot be deleted or undeleted.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        mock_executor.get.return_value = {"key": "theme", "value": "dark"}
        setting = Setting(mock_context, "theme")

        with pytest.raises(ReadOnlyModelError):
            setting.delete()
        with pytest.raises(ReadOnlyModelError):
            setting.undelete()
        mock_executor.delete.assert_not_called()
