##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module provides functionality for locating and loading the ActiveRow
configuration file, a YAML document with `servers` and `databases` sections.
"""
import logging
import os
from typing import Dict, Optional

from activerow.config import Config
from activerow.utils import load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

CONFIG_FILENAME = "activerow.yaml"
CONFIG_ENV_VAR = "ACTIVEROW_CONFIG"
ACTIVEROW_HOME = os.path.join(os.path.expanduser("~"), ".activerow")


def load_config(filepath: str) -> Optional[Dict]:
    """
    Reads an ActiveRow YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath: The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No config file at {filepath}")
        return None
    LOG.info(f"Reading config from file {filepath}")
    return load_yaml(filepath) or {}


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the ActiveRow configuration file.

    If a `path` is given, only that location is checked. It may be the file
    itself or a directory holding `activerow.yaml`. Otherwise the search order is:
      1. The file named by the `ACTIVEROW_CONFIG` environment variable.
      2. `activerow.yaml` in the current working directory.
      3. `activerow.yaml` in `~/.activerow`.

    Args:
        path: A specific file or directory to look in.

    Returns:
        The full path to the configuration file if found, otherwise `None`.
    """
    if path is not None:
        if os.path.isfile(path):
            return path
        candidate = os.path.join(path, CONFIG_FILENAME)
        return candidate if os.path.isfile(candidate) else None

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.isfile(env_path):
        return env_path

    local_config = os.path.join(os.getcwd(), CONFIG_FILENAME)
    if os.path.isfile(local_config):
        return local_config

    home_config = os.path.join(ACTIVEROW_HOME, CONFIG_FILENAME)
    if os.path.isfile(home_config):
        return home_config

    return None


def get_config(path: Optional[str] = None) -> Config:
    """
    Locate and load the configuration file into a `Config` object.

    Args:
        path: A file or directory to search instead of the default locations.

    Returns:
        The loaded configuration.

    Raises:
        ValueError: If no configuration file can be found.
    """
    filepath = find_config_file(path)
    if filepath is None:
        raise ValueError(
            f"Cannot find an activerow config file! Create '{CONFIG_FILENAME}' or point "
            f"the {CONFIG_ENV_VAR} environment variable at one."
        )

    return Config(load_config(filepath))
