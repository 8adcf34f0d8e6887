##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Tests for the `utils.py` module.
"""

import os

import pytest

from activerow.utils import array_blacklist, array_whitelist, as_column_list, is_column_mapping, load_yaml


def test_array_whitelist_follows_key_order_and_skips_missing():
    """
    Test that `array_whitelist` keeps the requested keys, in the requested order,
    and ignores keys missing from the data.
    """
    data = {"a": 1, "b": 2, "c": 3}
    result = array_whitelist(data, ["c", "a", "missing"])
    assert result == {"c": 3, "a": 1}
    assert list(result) == ["c", "a"]


def test_array_whitelist_keeps_none_values():
    """
    Test that `array_whitelist` keeps keys whose value is None.
    """
    assert array_whitelist({"a": None}, ["a"]) == {"a": None}


def test_array_blacklist_drops_keys_without_mutating():
    """
    Test that `array_blacklist` removes the given keys and leaves the input alone.
    """
    data = {"a": 1, "b": 2, "c": 3}
    assert array_blacklist(data, ("b", "missing")) == {"a": 1, "c": 3}
    assert data == {"a": 1, "b": 2, "c": 3}


@pytest.mark.parametrize(
    "columns, expected",
    [
        (None, []),
        ("name", ["name"]),
        (("id", "name"), ["id", "name"]),
        (["id"], ["id"]),
        ((col for col in ("a", "b")), ["a", "b"]),
    ],
)
def test_as_column_list(columns, expected):
    """
    Test that `as_column_list` normalizes every accepted column argument.

    Args:
        columns: The column argument to normalize.
        expected: The expected list of columns.
    """
    assert as_column_list(columns) == expected


@pytest.mark.parametrize("value, expected", [({"id": 1}, True), ({}, True), (1, False), ((1, 2), False), ([1], False)])
def test_is_column_mapping(value, expected):
    """
    Test that only mappings count as column-keyed lookups.

    Args:
        value: The lookup value to test.
        expected: The expected result.
    """
    assert is_column_mapping(value) is expected


def test_load_yaml(tmp_path):
    """
    Test that `load_yaml` reads a YAML document into a dictionary.

    Args:
        tmp_path: PyTest temporary directory fixture.
    """
    yaml_path = os.path.join(str(tmp_path), "test.yaml")
    with open(yaml_path, "w") as yaml_file:
        yaml_file.write("servers:\n  default:\n    database_type: sqlite\n")

    assert load_yaml(yaml_path) == {"servers": {"default": {"database_type": "sqlite"}}}
