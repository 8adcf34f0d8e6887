##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Base factory for the pluggable parts of ActiveRow.

A factory keeps a table of named component classes, a table of aliases, and
creates instances from a name plus a settings mapping. Configuration files refer
to components by name (for example a connection's `database_type`), so names
and aliases are matched case-insensitively.

Components shipped by ActiveRow are registered by `_register_builtins`. Other
packages can add their own through an entry point group, which is scanned the
first time a name is not found or the list of components is requested.
"""

import logging
from abc import ABC, abstractmethod
from importlib.metadata import entry_points
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type


LOG = logging.getLogger(__name__)


class ActiveRowBaseFactory(ABC):
    """
    Abstract factory mapping component names to classes.

    Subclasses decide which classes are built in, which classes are acceptable,
    where plugins are looked up, and which exception reports an unknown name.

    Attributes:
        _registry (Dict[str, Any]): Canonical names mapped to component classes.
        _aliases (Dict[str, str]): Alternative names mapped to canonical names.

    Methods:
        register: Add a component class under a name and optional aliases.
        resolve_name: Turn a name or alias into the canonical name.
        list_available: List the canonical names of every known component.
        create: Build a component from its name and settings.
        get_component_info: Describe a registered component.
    """

    def __init__(self):
        self._registry: Dict[str, Any] = {}
        self._aliases: Dict[str, str] = {}
        self._plugins_loaded: bool = False
        self._register_builtins()

    @abstractmethod
    def _register_builtins(self):
        """Register the components shipped with ActiveRow."""
        raise NotImplementedError("Subclasses of `ActiveRowBaseFactory` must implement a `_register_builtins` method.")

    @abstractmethod
    def _validate_component(self, component_class: Any):
        """
        Check that a class may be registered.

        Args:
            component_class: The class about to be registered.

        Raises:
            TypeError: If `component_class` is not acceptable.
        """
        raise NotImplementedError("Subclasses of `ActiveRowBaseFactory` must implement a `_validate_component` method.")

    @abstractmethod
    def _entry_point_group(self) -> str:
        """
        Name the entry point group scanned for plugins.

        Returns:
            The entry point group.
        """
        raise NotImplementedError("Subclasses of `ActiveRowBaseFactory` must implement an `_entry_point_group` method.")

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Report a name that matches no component.

        Args:
            msg: The error message.

        Raises:
            ValueError: Subclasses raise their own exception type instead.
        """
        raise ValueError(msg)

    @staticmethod
    def _normalize(name: str) -> str:
        return str(name).strip().lower()

    def _load_plugins(self):
        if self._plugins_loaded:
            return
        self._plugins_loaded = True

        group = self._entry_point_group()
        for entry_point in entry_points(group=group):
            try:
                self.register(entry_point.name, entry_point.load())
            except Exception as exc:  # pylint: disable=broad-exception-caught
                LOG.warning(f"Skipping plugin '{entry_point.name}' from '{group}': {exc}")
                continue
            LOG.info(f"Registered plugin '{entry_point.name}' from '{group}'.")

    def register(self, name: str, component_class: Any, aliases: Iterable[str] = None):
        """
        Add a component class under a name and optional aliases.

        Registering an existing name replaces the previous class.

        Args:
            name: The canonical name.
            component_class: The class to register.
            aliases: Other names that refer to the same component.

        Raises:
            TypeError: If `component_class` fails validation.
        """
        self._validate_component(component_class)

        canonical = self._normalize(name)
        self._registry[canonical] = component_class
        for alias in aliases or ():
            self._aliases[self._normalize(alias)] = canonical
        LOG.debug(f"Registered {component_class.__name__} as '{canonical}' (aliases: {list(aliases or [])}).")

    def resolve_name(self, component_type: str) -> str:
        """
        Turn a name or alias into the canonical name.

        Args:
            component_type: A name or alias.

        Returns:
            The canonical name. Unknown names are returned normalized.
        """
        name = self._normalize(component_type)
        return self._aliases.get(name, name)

    def list_available(self) -> List[str]:
        """
        List the canonical names of every known component, plugins included.

        Returns:
            The canonical names.
        """
        self._load_plugins()
        return list(self._registry)

    def _lookup(self, component_type: str) -> Tuple[str, Any]:
        canonical = self.resolve_name(component_type)
        if canonical not in self._registry:
            self._load_plugins()
        if canonical not in self._registry:
            self._raise_component_error_class(
                f"Component '{component_type}' is not supported. Available components: {', '.join(self.list_available())}"
            )
        return canonical, self._registry[canonical]

    def create(self, component_type: str, config: Mapping = None) -> Any:
        """
        Build a component from its name and settings.

        Args:
            component_type: A name or alias.
            config: Keyword arguments for the component's constructor.

        Returns:
            The new component.

        Raises:
            ValueError: If the constructor fails.
        """
        canonical, component_class = self._lookup(component_type)
        try:
            component = component_class(**dict(config or {}))
        except Exception as exc:
            raise ValueError(f"Failed to create component '{canonical}': {exc}") from exc
        LOG.debug(f"Created '{canonical}' component.")
        return component

    def get_component_info(self, component_type: str) -> Dict[str, str]:
        """
        Describe a registered component.

        Args:
            component_type: A name or alias.

        Returns:
            The canonical name, class name, module and docstring of the component.
        """
        canonical, component_class = self._lookup(component_type)
        return {
            "name": canonical,
            "class": component_class.__name__,
            "module": component_class.__module__,
            "description": component_class.__doc__ or "No description available",
        }
