##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module defines `InstanceRegistry`, the identity map of loaded models.

The registry maps `(model class, primary key tuple)` to the one live model
instance representing that row, so every lookup of the same row returns the
same object. It is only an index: it never creates models on its own except
through `get_instance`, and dropping an entry does not affect the model.

Every operation holds a re-entrant lock, so a load-then-register or a
save-then-rekey sequence is atomic with respect to other callers.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, Hashable, Mapping, Optional, Tuple, Type, Union


if TYPE_CHECKING:
    from activerow.db.context import DatabaseContext
    from activerow.db.model import Model


LOG = logging.getLogger(__name__)

RegistryKey = Tuple[Type, Tuple[Hashable, ...]]


class InstanceRegistry:
    """
    Identity map guaranteeing at most one live model instance per row.

    Attributes:
        _instances (Dict[RegistryKey, Model]): The registered models.
        _lock (threading.RLock): Guards every operation.

    Methods:
        make_key: Build the registry key for a model class and primary key.
        key_of: Build the registry key of a persisted model.
        get: Return the model registered for a primary key, if any.
        get_instance: Return the registered model for a lookup, loading it if needed.
        import_instance: Register a persisted model under its primary key.
        remove: Evict an entry by key or by model.
        rekey: Move a model from its old primary key to its current one.
        clear: Evict every entry.
    """

    def __init__(self):
        """
        Initialize an empty registry.
        """
        self._instances: Dict[RegistryKey, "Model"] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

    def __contains__(self, item: Union["Model", RegistryKey]) -> bool:
        with self._lock:
            key = self._as_key(item)
            return key is not None and key in self._instances

    def __repr__(self) -> str:
        return f"InstanceRegistry(size={len(self)})"

    @staticmethod
    def make_key(model_class: Type["Model"], primary_key: Union[Mapping, Tuple, Any]) -> RegistryKey:
        """
        Build the registry key for a model class and primary key.

        Args:
            model_class: The model class.
            primary_key: The primary key as a column mapping (ordered by the schema),
                a tuple of values, or a single value.

        Returns:
            The `(model class, primary key tuple)` key.
        """
        if isinstance(primary_key, Mapping):
            values = tuple(primary_key[col] for col in model_class.schema.primary_key)
        elif isinstance(primary_key, (tuple, list)):
            values = tuple(primary_key)
        else:
            values = (primary_key,)
        return (model_class, values)

    def key_of(self, model: "Model") -> Optional[RegistryKey]:
        """
        Build the registry key of a model from its persisted primary key.

        Args:
            model: The model.

        Returns:
            The key, or None if the model is fresh.
        """
        primary_key = model.get_primary_key()
        if primary_key is None:
            return None
        return self.make_key(type(model), primary_key)

    def _as_key(self, item: Union["Model", RegistryKey]) -> Optional[RegistryKey]:
        if isinstance(item, tuple):
            return item
        return self.key_of(item)

    def get(self, model_class: Type["Model"], primary_key: Union[Mapping, Tuple, Any]) -> Optional["Model"]:
        """
        Return the model registered for a primary key.

        Args:
            model_class: The model class.
            primary_key: The primary key (see `make_key`).

        Returns:
            The registered model, or None.
        """
        with self._lock:
            return self._instances.get(self.make_key(model_class, primary_key))

    def _cached_for_where(self, model_class: Type["Model"], where: Mapping) -> Optional["Model"]:
        # Only a filter on exactly the primary key identifies a registry entry
        if set(where) != set(model_class.schema.primary_key):
            return None
        try:
            return self._instances.get(self.make_key(model_class, where))
        except TypeError:
            # Unhashable lookup values can never match a key
            return None

    def get_instance(self, model_class: Type["Model"], where: Any, context: "DatabaseContext") -> Optional["Model"]:
        """
        Return the live model for a row, loading and registering it if needed.

        Args:
            model_class: The model class to look up.
            where: A primary key value, tuple, or column filter (see `Model.process_where`).
            context: The database context the loaded model is attached to.

        Returns:
            The registered model for the row, or None if no row matched.

        Raises:
            InvalidArgumentError: If `where` cannot be normalized.
        """
        where = model_class.process_where(where)

        with self._lock:
            cached = self._cached_for_where(model_class, where)
            if cached is not None:
                LOG.debug(f"Registry hit for {model_class.__name__} {where}.")
                return cached

            model = model_class(context)
            if not model.load(where):
                return None

            # If the row was already registered the existing instance wins
            return self._instances.get(self.key_of(model), model)

    def import_instance(self, model: "Model") -> bool:
        """
        Register a persisted model under its primary key.

        Args:
            model: The model to register.

        Returns:
            True if the model is registered, False if it is fresh or another
            instance already holds its key.
        """
        with self._lock:
            key = self.key_of(model)
            if key is None:
                return False
            current = self._instances.get(key)
            if current is not None and current is not model:
                LOG.debug(f"{key[0].__name__} {key[1]} is already registered to another instance.")
                return False
            self._instances[key] = model
            return True

    def remove(self, item: Union["Model", RegistryKey]) -> bool:
        """
        Evict an entry.

        Args:
            item: A registry key, or a model. A model only evicts its own entry.

        Returns:
            True if an entry was evicted.
        """
        with self._lock:
            if isinstance(item, tuple):
                return self._instances.pop(item, None) is not None

            key = self.key_of(item)
            if key is None or self._instances.get(key) is not item:
                return False
            del self._instances[key]
            return True

    def rekey(self, model: "Model", old_primary_key: Optional[Mapping]) -> bool:
        """
        Move a model from its old primary key to its current one.

        Args:
            model: The model whose primary key changed.
            old_primary_key: The primary key the model was registered under.

        Returns:
            True if the model is registered under its new key.
        """
        with self._lock:
            if old_primary_key is not None:
                old_key = self.make_key(type(model), old_primary_key)
                if self._instances.get(old_key) is model:
                    del self._instances[old_key]
            registered = self.import_instance(model)
            LOG.debug(f"Rekeyed {type(model).__name__} from {old_primary_key} to {model.get_primary_key()}.")
            return registered

    def clear(self):
        """
        Evict every entry.
        """
        with self._lock:
            self._instances.clear()
