##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module defines `Model`, the active-record base class of ActiveRow.

Each `Model` subclass maps to one table through its `schema`, and each instance
maps to one row. An instance keeps three pieces of state:

- the persisted data, as last read from the database (None for a fresh model),
- the pending changes made with `set()`, committed by `save()` or `update()`,
- the foreign models resolved from foreign key columns.

Loaded models are registered in the `InstanceRegistry` of their
`DatabaseContext`, so a row is represented by at most one live object. Foreign
keys resolve lazily through that registry on first access.

Subclasses customize validation and saving by overriding `validate_hook`,
`_pre_save_hook` and `_post_save_hook`.
"""

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Set, Union

from activerow.db.schema import (
    SOFT_DELETE_ACTIVE,
    SOFT_DELETE_DELETED,
    SOFT_DELETE_STAMP,
    STAMP_AUTO,
    STAMP_DATE,
    STAMP_DATETIME,
    STAMP_TIME,
    ModelSchema,
)
from activerow.exceptions import (
    ForeignConstraintError,
    InvalidArgumentError,
    InvalidDataError,
    MissingColumnError,
    ModelLogicError,
    NotForeignColumnError,
    ReadOnlyModelError,
    SchemaError,
    UnknownColumnError,
)
from activerow.executors.executor_base import StorageExecutor
from activerow.utils import array_blacklist, array_whitelist, as_column_list, is_column_mapping


if TYPE_CHECKING:
    from activerow.db.context import DatabaseContext
    from activerow.db.instance_registry import InstanceRegistry


LOG = logging.getLogger(__name__)


class _Marker:
    """A named sentinel stored in the foreign model cache."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


# The foreign key was resolved and references no row
NO_REFERENCE = _Marker("NO_REFERENCE")
# The foreign key is being resolved right now
RESOLVING = _Marker("RESOLVING")

# Soft delete column values as (deleted, active)
SOFT_DELETE_VALUES = {
    SOFT_DELETE_DELETED: (1, 0),
    SOFT_DELETE_ACTIVE: (0, 1),
    SOFT_DELETE_STAMP: (None, None),
}


class _TimestampSource:
    """
    Fetches the database timestamp at most once, so every stamp written by one
    operation shares the same instant.
    """

    def __init__(self, executor: StorageExecutor):
        self._executor = executor
        self._value: Optional[str] = None

    def __call__(self) -> str:
        if self._value is None:
            self._value = self._executor.current_timestamp()
        return self._value


def slice_timestamp(timestamp: str, mode: str) -> str:
    """
    Take the part of a `YYYY-MM-DD HH:MM:SS` timestamp a stamp column stores.

    Args:
        timestamp: The full timestamp.
        mode: "date", "time" or "datetime".

    Returns:
        The date part, the time part, or the whole timestamp.

    Raises:
        ModelLogicError: If `mode` is unknown.
    """
    date_part, _, time_part = timestamp.partition(" ")
    if mode == STAMP_DATE:
        return date_part
    if mode == STAMP_TIME:
        return time_part
    if mode == STAMP_DATETIME:
        return timestamp
    raise ModelLogicError(f"Unknown stamp mode '{mode}'")


class Model:  # pylint: disable=too-many-public-methods
    """
    Active-record base class: one subclass per table, one instance per row.

    Attributes:
        schema (ModelSchema): The table metadata. Every concrete subclass sets it.
        context (DatabaseContext): The context providing connections and the
            instance registry.

    Methods:
        get: Return the value of a column, resolving foreign keys to models.
        set: Buffer a new value for a column.
        unset: Buffer a null value for a column.
        is_set: Tell if a column holds a non-null value.
        set_multiple: Buffer new values for several columns.
        load_foreign: Resolve a foreign key value into the referenced model.
        load: Replace this model's data with a row from the database.
        reload: Load this model's row again.
        save: Insert or update this model's row with every pending change.
        update: Update selected pending columns of this model's row.
        delete: Remove this model's row, or mark it deleted.
        undelete: Clear the soft delete mark of this model's row.
        validate: Check data before it is written.
        validate_hook: Model-specific validation, for subclasses to override.
        get_primary_key: Return the persisted primary key.
        process_where: Normalize a lookup value into a column filter.
        dump: Select rows of this model's table.
        get_current_timestamp: Fetch the current timestamp from the database.
        to_dict: Serialize the model's data.
        to_json: Serialize the model's data to JSON.
        attach: Attach a deserialized model to a context.
    """

    schema: ModelSchema = None

    def __init__(self, context: "DatabaseContext", where: Any = None):
        """
        Create a model, fresh or loaded from the database.

        Args:
            context: The database context the model works in.
            where: A lookup value for `load()`. If None, a fresh model is created.

        Raises:
            SchemaError: If the model class does not declare a schema.
            InvalidArgumentError: If `where` is malformed or matches no row.
        """
        if not isinstance(type(self).schema, ModelSchema):
            raise SchemaError(f"Model '{type(self).__name__}' does not declare a schema")

        self.context: Optional["DatabaseContext"] = context
        self._persisted: Optional[Dict[str, Any]] = None
        self._pending: Dict[str, Any] = {}
        self._foreign: Dict[str, Any] = {}

        if where is not None and not self.load(where):
            raise InvalidArgumentError("Could not load from Database")

    def __repr__(self) -> str:
        if self._persisted is None:
            return f"{type(self).__name__}(fresh)"
        return f"{type(self).__name__}({self.get_primary_key()})"

    def __str__(self) -> str:
        return self.to_json()

    # Attribute access protocol

    def __getitem__(self, column: str) -> Any:
        return self.get(column)

    def __setitem__(self, column: str, value: Any):
        self.set(column, value)

    def __delitem__(self, column: str):
        self.unset(column)

    @property
    def is_fresh(self) -> bool:
        """True if the model was never persisted."""
        return self._persisted is None

    @property
    def persisted(self) -> Optional[Dict[str, Any]]:
        """A copy of the data last read from the database, or None for a fresh model."""
        return None if self._persisted is None else dict(self._persisted)

    @property
    def pending(self) -> Dict[str, Any]:
        """A copy of the changes waiting for `save()` or `update()`."""
        return dict(self._pending)

    @property
    def is_deleted(self) -> bool:
        """
        True if the persisted soft delete column marks the row as deleted.

        Raises:
            ModelLogicError: If the model is not soft-deletable.
        """
        column = self.schema.soft_delete
        if column is None:
            raise ModelLogicError(f"Model '{type(self).__name__}' is not soft-deletable")
        value = (self._persisted or {}).get(column)
        if self.schema.soft_delete_mode == SOFT_DELETE_STAMP:
            return value is not None
        deleted, _ = self._soft_delete_values()
        return value is not None and int(value) == deleted

    @classmethod
    def _check_column(cls, column: str):
        if not cls.schema.has_column(column):
            raise UnknownColumnError(column)

    def _check_writable(self):
        if self.schema.read_only:
            raise ReadOnlyModelError(type(self).__name__)

    def _raw(self, column: str) -> Any:
        if column in self._pending:
            return self._pending[column]
        return (self._persisted or {}).get(column)

    def get(self, column: str) -> Any:
        """
        Return the value of a column.

        Pending changes take precedence over persisted data. A foreign key column
        returns the referenced model (or None), resolving it on first access.

        Args:
            column: A known column.

        Returns:
            The column value, or the referenced model for a foreign key.

        Raises:
            UnknownColumnError: If `column` is not in the schema.
            ForeignConstraintError: If a foreign key references a missing row.
            ModelLogicError: If foreign key resolution loops back onto this column.
        """
        self._check_column(column)
        if not self.schema.is_foreign(column):
            return self._raw(column)

        cached = self._foreign.get(column)
        if cached is RESOLVING:
            raise ModelLogicError(f"Circular resolution of foreign column '{column}' in '{type(self).__name__}'")
        if cached is None:
            self.load_foreign(column, self._raw(column))
            cached = self._foreign[column]
        return None if cached is NO_REFERENCE else cached

    def is_set(self, column: str) -> bool:
        """
        Tell if a column holds a non-null value.

        Args:
            column: A known column.

        Returns:
            True if `get(column)` is not None.
        """
        return self.get(column) is not None

    def set(self, column: str, value: Any):
        """
        Buffer a new value for a column.

        Changes reach the database with `save()` or `update()`. A foreign key
        accepts either a model of the referenced class or a raw value, which must
        match an existing row.

        Args:
            column: A known column.
            value: The new value.

        Raises:
            ReadOnlyModelError: If the model is read-only.
            UnknownColumnError: If `column` is not in the schema.
            ForeignConstraintError: If a foreign key value matches no row. The
                pending value is left unchanged.
            ModelLogicError: If a foreign key is given a fresh model.
        """
        self._check_writable()
        self._check_column(column)

        if self.schema.is_foreign(column):
            foreign_key = self.schema.foreign_keys[column]
            if isinstance(value, foreign_key.resolve_model()):
                if value.is_fresh:
                    raise ModelLogicError(f"Can not reference a fresh '{type(value).__name__}' in column '{column}'")
                self._foreign[column] = value
                self._pending[column] = value.persisted[foreign_key.column]
                return
            self.load_foreign(column, value)

        self._pending[column] = value

    def unset(self, column: str):
        """
        Buffer a null value for a column.

        Args:
            column: A known column.
        """
        self.set(column, None)

    def set_multiple(self, data: Mapping):
        """
        Buffer new values for several columns.

        Args:
            data: A mapping of known columns to values.
        """
        for column, value in data.items():
            self.set(column, value)

    def load_foreign(self, column: str, value: Any):
        """
        Resolve a foreign key value into the referenced model and cache it.

        Args:
            column: A foreign key column.
            value: The value of the referenced column. None clears the reference.

        Raises:
            UnknownColumnError: If `column` is not in the schema.
            NotForeignColumnError: If `column` is not a foreign key.
            ForeignConstraintError: If no referenced row matches `value`.
        """
        self._check_column(column)
        if not self.schema.is_foreign(column):
            raise NotForeignColumnError(column)

        if value is None:
            self._foreign[column] = NO_REFERENCE
            return
        if isinstance(value, Model):
            raise InvalidArgumentError(f"Column '{column}' can not reference a '{type(value).__name__}'")

        foreign_key = self.schema.foreign_keys[column]
        previous = self._foreign.get(column)
        self._foreign[column] = RESOLVING
        foreign = None
        try:
            foreign = self._registry().get_instance(
                foreign_key.resolve_model(), {foreign_key.column: value}, self.context
            )
        finally:
            if foreign is None:
                if previous is None:
                    self._foreign.pop(column, None)
                else:
                    self._foreign[column] = previous

        if foreign is None:
            raise ForeignConstraintError(type(self).__name__, column)
        self._foreign[column] = foreign

    # Context plumbing

    def _require_context(self) -> "DatabaseContext":
        if self.context is None:
            raise ModelLogicError(f"'{type(self).__name__}' is not attached to a database context; call attach()")
        return self.context

    def _executor(self) -> StorageExecutor:
        return self._require_context().get_connection(self.schema.database)

    def _registry(self) -> "InstanceRegistry":
        return self._require_context().instances

    def _timestamp_source(self) -> Callable[[], str]:
        return _TimestampSource(self._executor())

    @classmethod
    def get_current_timestamp(cls, context: "DatabaseContext") -> str:
        """
        Fetch the current timestamp from this model's database.

        Args:
            context: The database context to use.

        Returns:
            The timestamp formatted as `YYYY-MM-DD HH:MM:SS`.
        """
        return context.get_connection(cls.schema.database).current_timestamp()

    @classmethod
    def dump(cls, context: "DatabaseContext", where: Optional[Mapping] = None, columns: Iterable[str] = None) -> List[Dict]:
        """
        Select rows of this model's table.

        Args:
            context: The database context to use.
            where: A column filter. None selects every row.
            columns: The columns to fetch. Defaults to every known column.

        Returns:
            The matching rows as dictionaries.

        Raises:
            UnknownColumnError: If any requested column is not in the schema.
        """
        columns = as_column_list(columns) or list(cls.schema.columns)
        unknown = [column for column in columns if not cls.schema.has_column(column)]
        if unknown:
            raise UnknownColumnError(unknown)
        return context.get_connection(cls.schema.database).select(cls.schema.table, columns, where)

    # Basic methods

    def get_primary_key(self) -> Optional[Dict[str, Any]]:
        """
        Return the persisted primary key.

        Pending changes are ignored: the primary key only changes once committed.

        Returns:
            The primary key columns and values, or None for a fresh model.
        """
        if self._persisted is None:
            return None
        return array_whitelist(self._persisted, self.schema.primary_key)

    @classmethod
    def process_where(cls, where: Any) -> Dict[str, Any]:
        """
        Normalize a lookup value into a column filter.

        A mapping is used as is. A scalar, tuple or list is paired positionally
        with the primary key columns.

        Args:
            where: A primary key value, a tuple or list of them, or a column filter.

        Returns:
            A mapping of columns to values.

        Raises:
            InvalidArgumentError: If `where` is None or empty, or its length does
                not match the primary key.
        """
        if where is None:
            raise InvalidArgumentError("Primary Key can not be null")
        if is_column_mapping(where):
            if not where:
                raise InvalidArgumentError("Lookup filter can not be empty")
            return dict(where)

        values = list(where) if isinstance(where, (list, tuple)) else [where]
        primary_key = cls.schema.primary_key
        if len(values) != len(primary_key):
            raise InvalidArgumentError("Could not solve Primary Key")
        return dict(zip(primary_key, values))

    def _reset(self):
        self._pending = {}
        self._persisted = None
        self._foreign = {}

    def _stamp(self, data: Dict[str, Any], timestamp: Callable[[], str]) -> Dict[str, Any]:
        stamped = dict(data)
        for column, mode in self.schema.stamp_columns.items():
            if mode == STAMP_AUTO or column in self._pending or column in stamped:
                continue
            if mode not in (STAMP_DATE, STAMP_TIME, STAMP_DATETIME):
                raise ModelLogicError(f"Unknown stamp mode '{mode}' for column '{column}'")
            stamped[column] = slice_timestamp(timestamp(), mode)
        return stamped

    @classmethod
    def validate(cls, data: Mapping, full: bool) -> Dict[str, Any]:
        """
        Check data before it is written, returning the data to write.

        Args:
            data: The columns and values to be written.
            full: If True, `data` must contain every required column.

        Returns:
            The validated data, patched by `validate_hook`.

        Raises:
            MissingColumnError: If `full` and required columns are missing.
            UnknownColumnError: If `data` has columns outside the schema.
            InvalidDataError: If `validate_hook` rejects the data.
        """
        if full:
            missing = [column for column in cls.schema.required_columns if column not in data]
            if missing:
                raise MissingColumnError(missing)

        unknown = [column for column in data if not cls.schema.has_column(column)]
        if unknown:
            raise UnknownColumnError(unknown)

        result = cls.validate_hook(dict(data), full)
        if result is False:
            raise InvalidDataError(f"Invalid data for model '{cls.__name__}'")
        if isinstance(result, Mapping):
            return {**data, **result}
        return dict(data)

    # CRUD methods

    def load(self, where: Any) -> bool:
        """
        Replace this model's data with a row from the database.

        Pending changes and resolved foreign models are discarded. The model is
        registered in the instance registry under the loaded primary key.

        Args:
            where: A primary key value, a tuple or list of them, or a column filter.

        Returns:
            True if a row was loaded, False if none matched (the model is untouched).

        Raises:
            InvalidArgumentError: If `where` is malformed (see `process_where`).
        """
        where = self.process_where(where)
        old_primary_key = self.get_primary_key()

        row = self._executor().get(self.schema.table, self.schema.columns, where)
        if not row:
            LOG.debug(f"No {type(self).__name__} row matches {where}.")
            return False

        self._reset()
        self._persisted = dict(row)
        if old_primary_key:
            self._registry().rekey(self, old_primary_key)
        else:
            self._registry().import_instance(self)
        LOG.debug(f"Loaded {type(self).__name__} {self.get_primary_key()}.")
        return True

    def reload(self) -> bool:
        """
        Load this model's row again.

        Returns:
            True if the row was loaded.

        Raises:
            InvalidArgumentError: If the model is fresh.
        """
        return self.load(self.get_primary_key())

    def save(self) -> bool:
        """
        Insert or update this model's row with every pending change.

        A fresh model is inserted and then loaded back, so database defaults and
        generated ids are reflected. A persisted model is updated in place.

        Returns:
            True on success. False if nothing is pending, `_pre_save_hook`
            rejected the save, or the database reported a failure.

        Raises:
            ReadOnlyModelError: If the model is read-only.
            MissingColumnError, UnknownColumnError, InvalidDataError: See `validate()`.
        """
        self._check_writable()
        if not self._pending:
            return False

        fresh = self.is_fresh
        if self._pre_save_hook(fresh) is False:
            LOG.debug(f"Save of {type(self).__name__} rejected by its pre-save hook.")
            return False

        data = self._stamp(self._pending, self._timestamp_source())
        data = self.validate(data, fresh)
        payload = array_blacklist(data, self.schema.generated_columns)
        executor = self._executor()
        primary_key = self.schema.primary_key

        if fresh:
            auto_increment = self.schema.auto_increment
            result = executor.insert(self.schema.table, payload, id_column=auto_increment)
            if not result.ok:
                LOG.debug(f"Insert into '{self.schema.table}' failed.")
                return False
            if auto_increment is not None:
                data[auto_increment] = result.last_insert_id
            saved = self.load(array_whitelist(data, primary_key))
        else:
            old_primary_key = self.get_primary_key()
            needs_rekey = any(column in payload for column in primary_key)
            result = executor.update(self.schema.table, payload, old_primary_key)
            if not result.ok:
                LOG.debug(f"Update of '{self.schema.table}' {old_primary_key} failed.")
                return False
            self._pending = {}
            self._persisted.update(payload)
            if needs_rekey:
                self._registry().rekey(self, old_primary_key)
            saved = True

        if saved:
            self._post_save_hook(fresh)
        return saved

    def update(self, columns: Union[str, Iterable[str]]) -> bool:
        """
        Update selected pending columns of this model's row.

        Pending changes to other columns are kept.

        Args:
            columns: A column or columns to update.

        Returns:
            True on success. False if none of `columns` is pending or the database
            reported a failure.

        Raises:
            ReadOnlyModelError: If the model is read-only.
            ModelLogicError: If the model is fresh.
            UnknownColumnError: If a requested column is not in the schema.
            InvalidDataError: See `validate()`.
        """
        self._check_writable()
        if self.is_fresh:
            raise ModelLogicError("Can not update a fresh Model")

        columns = as_column_list(columns)
        unknown = [column for column in columns if not self.schema.has_column(column)]
        if unknown:
            raise UnknownColumnError(unknown)
        return self._update(columns, self._timestamp_source())

    def _update(self, columns: List[str], timestamp: Callable[[], str]) -> bool:
        data = array_whitelist(self._pending, columns)
        if not data:
            return False

        data = self._stamp(data, timestamp)
        data = self.validate(data, False)
        payload = array_blacklist(data, self.schema.generated_columns)

        old_primary_key = self.get_primary_key()
        needs_rekey = any(column in payload for column in self.schema.primary_key)

        result = self._executor().update(self.schema.table, payload, old_primary_key)
        if not result.ok:
            LOG.debug(f"Update of {columns} in '{self.schema.table}' {old_primary_key} failed.")
            return False

        self._pending = array_blacklist(self._pending, columns)
        self._persisted.update(payload)
        if needs_rekey:
            self._registry().rekey(self, old_primary_key)
        return True

    def _soft_delete_values(self):
        mode = self.schema.soft_delete_mode
        if mode not in SOFT_DELETE_VALUES:
            raise ModelLogicError(f"Unknown soft delete mode '{mode}'")
        return SOFT_DELETE_VALUES[mode]

    def delete(self) -> bool:
        """
        Remove this model's row, or mark it deleted if the model is soft-deletable.

        A hard delete unregisters the model and clears its data.

        Returns:
            True if the row was removed or marked. False if the database reported
            a failure or no row was affected.

        Raises:
            ReadOnlyModelError: If the model is read-only.
            ModelLogicError: If the model is fresh or its soft delete mode is unknown.
        """
        self._check_writable()
        if self.is_fresh:
            raise ModelLogicError("Can not delete a fresh Model")

        column = self.schema.soft_delete
        if column is not None:
            deleted, _ = self._soft_delete_values()
            timestamp = self._timestamp_source()
            self.set(column, timestamp() if self.schema.soft_delete_mode == SOFT_DELETE_STAMP else deleted)
            return self._update([column], timestamp)

        primary_key = self.get_primary_key()
        result = self._executor().delete(self.schema.table, primary_key)
        if not result.ok:
            LOG.debug(f"Delete of '{self.schema.table}' {primary_key} failed.")
            return False

        self._registry().remove(self)
        self._reset()
        LOG.info(f"Deleted {type(self).__name__} {primary_key}.")
        return result.affected > 0

    def undelete(self) -> bool:
        """
        Clear the soft delete mark of this model's row.

        Returns:
            True on success, False if the database reported a failure.

        Raises:
            ReadOnlyModelError: If the model is read-only.
            ModelLogicError: If the model is fresh, not soft-deletable, or its soft
                delete mode is unknown.
        """
        self._check_writable()
        column = self.schema.soft_delete
        if column is None:
            raise ModelLogicError("Model is not soft-deletable")
        if self.is_fresh:
            raise ModelLogicError("Can not undelete a fresh Model")

        _, active = self._soft_delete_values()
        self.set(column, active)
        return self._update([column], self._timestamp_source())

    # Hook methods

    @classmethod
    def validate_hook(cls, data: Dict[str, Any], full: bool) -> Union[bool, Mapping, None]:
        """
        Model-specific validation.

        Override this method to validate data for your model. Return False to
        reject the data, or a mapping of columns to patched values that are
        merged over `data`. Any other return value accepts the data unchanged.

        Args:
            data: The data to be validated.
            full: If `data` is supposed to contain every required column.

        Returns:
            True, False, or a mapping of patched values.
        """
        return True

    def _pre_save_hook(self, fresh: bool) -> bool:
        """
        Hook called by `save()` before validation. Returning False cancels the save.

        Args:
            fresh: True if the save will insert a new row.
        """
        return True

    def _post_save_hook(self, fresh: bool):
        """
        Hook called after `save()` succeeded.

        Args:
            fresh: True if a new row was inserted.
        """

    # Serialization

    def to_dict(self, _seen: Optional[Set[int]] = None) -> Optional[Dict[str, Any]]:
        """
        Serialize the model's data.

        Persisted data is overlaid with pending changes. Foreign key columns whose
        model is already resolved are replaced by that model's serialization.

        Returns:
            The data as a dictionary, or None if the model has no data.
        """
        data = {**(self._persisted or {}), **self._pending}
        if not data:
            return None

        seen = set(_seen or ()) | {id(self)}
        for column, foreign in self._foreign.items():
            if isinstance(foreign, Model) and id(foreign) not in seen:
                data[column] = foreign.to_dict(seen)
        return data

    def to_json(self) -> str:
        """
        Serialize the model's data to JSON.

        Returns:
            The JSON text of `to_dict()`.
        """
        return json.dumps(self.to_dict(), default=str)

    def __getstate__(self) -> Dict[str, Any]:
        return {"persisted": self._persisted, "pending": self._pending}

    def __setstate__(self, state: Dict[str, Any]):
        self.context = None
        self._persisted = state["persisted"]
        self._pending = state["pending"]
        self._foreign = {}

    def attach(self, context: "DatabaseContext") -> "Model":
        """
        Attach a deserialized model to a context.

        Unpickled models carry no context. A persisted model is registered in the
        context's instance registry unless that row is already represented there.

        Args:
            context: The database context to use.

        Returns:
            This model.
        """
        self.context = context
        if not self.is_fresh:
            context.instances.import_instance(self)
        return self
