##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Tests for serializing, pickling and dumping `Model` instances.
"""

import json
import pickle

import pytest

from activerow.exceptions import ModelLogicError, UnknownColumnError
from tests.example_models import Address, Node, Person, Widget
from tests.fixture_types import FixtureContext, FixtureExecutor


# pylint: disable=redefined-outer-name


@pytest.fixture
def ada(sqlite_context: FixtureContext) -> Person:
    """
    A person named Ada with a fixed `updated` stamp, saved in the in-memory database.

    Args:
        sqlite_context: A database context over an in-memory SQLite database.

    Returns:
        The saved person.
    """
    person = Person(sqlite_context)
    person.set_multiple({"name": "Ada", "updated": "2024-01-01 00:00:00"})
    assert person.save()
    return person


@pytest.fixture
def widgets(sqlite_context: FixtureContext) -> list:
    """
    Three widgets saved in the in-memory database.

    Args:
        sqlite_context: A database context over an in-memory SQLite database.

    Returns:
        The saved widgets.
    """
    saved = []
    for name in ("bolt", "nut", "washer"):
        widget = Widget(sqlite_context)
        widget.set("name", name)
        assert widget.save()
        saved.append(widget)
    return saved


class TestToDict:
    """
    Tests for `to_dict` and `to_json`.
    """

    def test_fresh_model(self, mock_context: FixtureContext):
        """
        Test that a model without data serializes to None.

        Args:
            mock_context: A database context over a mocked executor.
        """
        widget = Widget(mock_context)
        assert widget.to_dict() is None
        assert widget.to_json() == "null"
        assert str(widget) == "null"

    def test_pending_overlays_persisted(self, ada: Person):
        """
        Test that pending changes are serialized over the persisted data.

        Args:
            ada: A saved person.
        """
        ada.set("email", "ada@example.com")
        assert ada.to_dict() == {
            "id": 1,
            "name": "Ada",
            "email": "ada@example.com",
            "updated": "2024-01-01 00:00:00",
        }

    def test_fresh_model_with_pending_data(self, mock_context: FixtureContext):
        """
        Test that a fresh model serializes its pending changes.

        Args:
            mock_context: A database context over a mocked executor.
        """
        widget = Widget(mock_context)
        widget.set("name", "bolt")
        assert json.loads(widget.to_json()) == {"name": "bolt"}

    def test_unresolved_foreign_key_stays_raw(self, sqlite_context: FixtureContext, ada: Person):
        """
        Test that a foreign key that was never resolved is serialized as its value.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            ada: A saved person.
        """
        address_id = sqlite_context.get_connection().insert("addresses", {"person": 1, "street": "Row"}).last_insert_id
        address = sqlite_context.get_instance(Address, address_id)

        assert address.to_dict() == {"id": address_id, "person": 1, "street": "Row", "deleted": 0}

    def test_resolved_foreign_key_is_nested(self, sqlite_context: FixtureContext, ada: Person):
        """
        Test that a resolved foreign model is serialized in place of its key.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            ada: A saved person.
        """
        address = Address(sqlite_context)
        address.set_multiple({"person": ada, "street": "Row"})
        assert address.save()
        address.get("person")

        data = json.loads(address.to_json())
        assert data["person"] == ada.to_dict()
        assert data["street"] == "Row"

    def test_reference_cycle(self, sqlite_context: FixtureContext):
        """
        Test that models referencing each other serialize without recursing forever.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
        """
        first = Node(sqlite_context)
        first.set("label", "first")
        assert first.save()
        second = Node(sqlite_context)
        second.set_multiple({"label": "second", "parent": first})
        assert second.save()
        first.set("parent", second)
        second.get("parent")

        assert first.to_dict() == {
            "id": 1,
            "label": "first",
            "parent": {"id": 2, "label": "second", "parent": 1},
        }


class TestPickle:
    """
    Tests for pickling models and attaching them to a context.
    """

    def test_round_trip_drops_context(self, ada: Person):
        """
        Test that unpickling restores data and pending changes without a context.

        Args:
            ada: A saved person.
        """
        ada.set("email", "ada@example.com")

        copy = pickle.loads(pickle.dumps(ada))

        assert copy.context is None
        assert copy.persisted == ada.persisted
        assert copy.pending == {"email": "ada@example.com"}
        assert copy.get("name") == "Ada"

    def test_detached_model_needs_attach(self, sqlite_context: FixtureContext, ada: Person):
        """
        Test that a detached model cannot reach storage until it is attached.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            ada: A saved person.
        """
        copy = pickle.loads(pickle.dumps(ada))
        copy.set("email", "ada@example.com")

        with pytest.raises(ModelLogicError, match="attach"):
            copy.save()

        sqlite_context.instances.remove(ada)
        assert copy.attach(sqlite_context) is copy
        assert copy.save()
        assert sqlite_context.instances.get(Person, 1) is copy

    def test_attach_keeps_registered_instance(self, sqlite_context: FixtureContext, ada: Person):
        """
        Test that attaching a copy of a registered row does not replace the live model.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            ada: A saved person.
        """
        copy = pickle.loads(pickle.dumps(ada)).attach(sqlite_context)

        assert copy.context is sqlite_context
        assert sqlite_context.get_instance(Person, 1) is ada


class TestDump:
    """
    Tests for `dump`.
    """

    def test_dump_all(self, sqlite_context: FixtureContext, widgets: list):
        """
        Test that every row and column is dumped by default.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            widgets: The saved widgets.
        """
        assert Widget.dump(sqlite_context) == [widget.persisted for widget in widgets]

    def test_dump_columns_and_filter(self, sqlite_context: FixtureContext, widgets: list):
        """
        Test that `dump` selects the requested columns of the matching rows.

        Args:
            sqlite_context: A database context over an in-memory SQLite database.
            widgets: The saved widgets.
        """
        assert Widget.dump(sqlite_context, {"name": ["nut", "washer"]}, "name") == [{"name": "nut"}, {"name": "washer"}]

    def test_dump_unknown_column(self, mock_context: FixtureContext, mock_executor: FixtureExecutor):
        """
        Test that `dump` rejects unknown columns before querying.

        Args:
            mock_context: A database context over a mocked executor.
            mock_executor: The mocked executor of `mock_context`.
        """
        with pytest.raises(UnknownColumnError):
            Widget.dump(mock_context, columns=["name", "colour"])
        mock_executor.select.assert_not_called()
