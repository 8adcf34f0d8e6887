##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Module for project-wide utility functions.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Union

import yaml


LOG = logging.getLogger(__name__)


def array_whitelist(data: Mapping, keys: Iterable[str]) -> Dict[str, Any]:
    """
    Project a mapping down to the given keys.

    Keys that are missing from `data` are skipped. The order of the result
    follows the order of `keys`.

    Args:
        data: The mapping to project.
        keys: The keys to keep.

    Returns:
        A new dictionary holding only the whitelisted items.
    """
    return {key: data[key] for key in keys if key in data}


def array_blacklist(data: Mapping, keys: Iterable[str]) -> Dict[str, Any]:
    """
    Remove the given keys from a mapping.

    Args:
        data: The mapping to filter.
        keys: The keys to drop.

    Returns:
        A new dictionary without the blacklisted items.
    """
    blacklist = set(keys)
    return {key: value for key, value in data.items() if key not in blacklist}


def as_column_list(columns: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize a column argument to a list of column names.

    A single string counts as one column rather than an iterable of characters.

    Args:
        columns: A column name, an iterable of column names, or None.

    Returns:
        A list of column names (empty if `columns` is None).
    """
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def is_column_mapping(value: Any) -> bool:
    """
    Tell if a lookup value is already keyed by column names.

    Args:
        value: The lookup value to test.

    Returns:
        True if `value` is a mapping, False otherwise.
    """
    return isinstance(value, Mapping)


def load_yaml(filepath: str) -> Dict:
    """
    Safely read a YAML file and return its contents.

    Args:
        filepath: The file path to the YAML file to be read.

    Returns:
        A dict representing the contents of the YAML file.
    """
    with open(filepath, "r") as _file:
        return yaml.safe_load(_file)
