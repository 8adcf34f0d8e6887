##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Used to store the connection configuration.

The configuration document has two sections. `servers` describes how to reach a
database server (host, credentials, engine kind) and `databases` names the
database to use on a server. A connection name refers to an entry in `databases`,
which is paired with the server of the same name unless it names one explicitly.

Modules:
    configfile.py: Handles locating and loading the YAML configuration file.
"""
from copy import deepcopy
from typing import Dict, List, Optional

from activerow.exceptions import ConnectionNotConfiguredError


REQUIRED_CONNECTION_KEYS = ("database_type", "database_name")


class Config:
    """
    The Config class, meant to store all connection settings in one place.

    Attributes:
        servers (Dict[str, Dict]): Server settings keyed by server name.
        databases (Dict[str, Dict]): Database settings keyed by connection name.

    Methods:
        __copy__: Creates a shallow copy of the Config instance.
        __str__: Returns a formatted string representation of the Config instance.
        connection_names: List every configured connection name.
        get_connection_params: Build the parameters for one named connection.
    """

    def __init__(self, app_dict: Optional[Dict] = None):
        """
        Initializes the Config instance with configuration data from a dictionary.

        Args:
            app_dict: A dictionary that may include the keys "servers" and "databases".
        """
        app_dict = app_dict or {}
        self.servers: Dict[str, Dict] = dict(app_dict.get("servers") or {})
        self.databases: Dict[str, Dict] = dict(app_dict.get("databases") or {})

    def __copy__(self) -> "Config":
        """
        Creates a shallow copy of the Config instance.

        Returns:
            A new Config instance with copied `servers` and `databases` sections.
        """
        return Config({"servers": dict(self.servers), "databases": dict(self.databases)})

    def __str__(self) -> str:
        """
        Returns a formatted string representation of the Config instance.

        Passwords are masked.
        """
        formatted_str = "config:"
        for section_name, section in (("servers", self.servers), ("databases", self.databases)):
            formatted_str += f"\n  {section_name}:"
            if not section:
                formatted_str += "\n    None"
                continue
            for name, settings in section.items():
                formatted_str += f"\n    {name}:"
                for key, val in (settings or {}).items():
                    shown = "******" if key == "password" else val
                    formatted_str += f"\n      {key}: {shown!r}"
        return formatted_str

    def connection_names(self) -> List[str]:
        """
        List every configured connection name.

        Returns:
            The names in the `databases` section.
        """
        return list(self.databases.keys())

    def get_connection_params(self, name: str) -> Dict:
        """
        Build the parameters for one named connection.

        The database entry is merged over its server entry. The server is the one
        named by the database entry's `server` key, or the server with the same name.

        Args:
            name: The connection name, a key of the `databases` section.

        Returns:
            A dictionary with at least `database_type` and `database_name`.

        Raises:
            ConnectionNotConfiguredError: If the connection, its server, or a
                required setting is missing.
        """
        if name not in self.databases:
            raise ConnectionNotConfiguredError(f"Database '{name}' is not configured")

        database = deepcopy(self.databases[name] or {})
        server_name = database.pop("server", name)
        if server_name not in self.servers:
            raise ConnectionNotConfiguredError(f"Server '{server_name}' for database '{name}' is not configured")

        params = deepcopy(self.servers[server_name] or {})
        params.update(database)

        missing = [key for key in REQUIRED_CONNECTION_KEYS if not params.get(key)]
        if missing:
            raise ConnectionNotConfiguredError(
                f"Connection '{name}' is missing required setting(s): {', '.join(missing)}"
            )
        return params
