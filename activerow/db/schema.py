##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
This module houses `ModelSchema`, the dataclass describing the table a model maps to.

A model class declares its schema once as a class attribute:

    class Widget(Model):
        schema = ModelSchema(
            table="widgets",
            columns=("id", "name", "deleted"),
            soft_delete="deleted",
        )

The defaults match the most common table layout: an auto-increment `id` column
that is also the primary key.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type, Union

from activerow.exceptions import SchemaError
from activerow.utils import as_column_list


LOG = logging.getLogger(__name__)

STAMP_AUTO = "auto"
STAMP_DATE = "date"
STAMP_TIME = "time"
STAMP_DATETIME = "datetime"
STAMP_MODES = (STAMP_AUTO, STAMP_DATE, STAMP_TIME, STAMP_DATETIME)

SOFT_DELETE_DELETED = "deleted"
SOFT_DELETE_ACTIVE = "active"
SOFT_DELETE_STAMP = "stamp"
SOFT_DELETE_MODES = (SOFT_DELETE_DELETED, SOFT_DELETE_ACTIVE, SOFT_DELETE_STAMP)


@dataclass(frozen=True)
class ForeignKey:
    """
    A reference from a local column to a column of another model.

    Attributes:
        model: The referenced model class, or its dotted import path.
        column: The referenced column.
    """

    model: Union[Type, str]
    column: str = "id"

    def resolve_model(self) -> Type:
        """
        Return the referenced model class, importing it if it was given as a path.

        Dotted paths allow models to reference each other without circular imports.

        Returns:
            The referenced model class.
        """
        if isinstance(self.model, str):
            from importlib import import_module  # pylint: disable=import-outside-toplevel

            module_name, _, class_name = self.model.rpartition(".")
            if not module_name:
                raise SchemaError(f"Foreign model path '{self.model}' must be a dotted 'module.Class' path")
            return getattr(import_module(module_name), class_name)
        return self.model


@dataclass
class ModelSchema:  # pylint: disable=too-many-instance-attributes
    """
    The table metadata of a model class.

    Attributes:
        table: The table the model works with.
        columns: The columns the model expects to exist.
        primary_key: The primary key column or columns.
        auto_increment: The column generated by the database on insert, if any.
            It is never written by inserts or updates.
        optional_columns: Columns that are nullable or have a default value.
            They are not required when saving a fresh model.
        stamp_columns: Columns filled with the current timestamp on every write,
            mapped to a mode: "date", "time", "datetime", or "auto" if the
            database fills the column itself.
        foreign_keys: Local columns mapped to the `ForeignKey` they reference. A
            `(model, column)` tuple is accepted too.
        read_only: If True, `set()`, `save()`, `update()` and `delete()` are disabled.
        soft_delete: The column marking a row as deleted, if `delete()` should not
            remove rows.
        soft_delete_mode: How the soft delete column works: "deleted" (0 or 1),
            "active" (1 or 0) or "stamp" (null or the deletion timestamp).
        database: The name of the configured connection the model uses.
    """

    table: str
    columns: Tuple[str, ...] = ("id",)
    primary_key: Tuple[str, ...] = ("id",)
    auto_increment: Optional[str] = "id"
    optional_columns: Tuple[str, ...] = ()
    stamp_columns: Dict[str, str] = field(default_factory=dict)
    foreign_keys: Dict[str, ForeignKey] = field(default_factory=dict)
    read_only: bool = False
    soft_delete: Optional[str] = None
    soft_delete_mode: str = SOFT_DELETE_DELETED
    database: str = "default"

    def __post_init__(self):
        """
        Normalize the declared collections and check that they are consistent.

        Raises:
            SchemaError: If the schema refers to undeclared columns.
        """
        self.columns = tuple(as_column_list(self.columns))
        self.primary_key = tuple(as_column_list(self.primary_key))
        self.optional_columns = tuple(as_column_list(self.optional_columns))
        self.stamp_columns = dict(self.stamp_columns)
        self.foreign_keys = {
            col: ref if isinstance(ref, ForeignKey) else ForeignKey(*ref) for col, ref in self.foreign_keys.items()
        }
        self._check()

    def _check(self):
        if not self.table:
            raise SchemaError("A model schema needs a table name")
        if not self.primary_key:
            raise SchemaError(f"Table '{self.table}' needs at least one primary key column")
        if len(set(self.columns)) != len(self.columns):
            raise SchemaError(f"Table '{self.table}' declares duplicate columns")

        declared = {
            "primary key": self.primary_key,
            "optional columns": self.optional_columns,
            "stamp columns": tuple(self.stamp_columns),
            "foreign keys": tuple(self.foreign_keys),
            "auto increment": (self.auto_increment,) if self.auto_increment else (),
            "soft delete": (self.soft_delete,) if self.soft_delete else (),
        }
        for what, names in declared.items():
            unknown = [name for name in names if name not in self.columns]
            if unknown:
                raise SchemaError(f"Table '{self.table}' {what} refer to unknown column(s): {', '.join(unknown)}")

    def has_column(self, column: str) -> bool:
        """Tell if `column` is declared."""
        return column in self.columns

    def is_foreign(self, column: str) -> bool:
        """Tell if `column` is a foreign key."""
        return column in self.foreign_keys

    @property
    def auto_stamp_columns(self) -> Tuple[str, ...]:
        """The stamp columns filled by the database itself."""
        return tuple(col for col, mode in self.stamp_columns.items() if mode == STAMP_AUTO)

    @property
    def required_columns(self) -> Tuple[str, ...]:
        """
        The columns a fresh row must provide.

        Every column except the optional ones, the auto increment, the soft delete
        column and the stamp columns filled by the database.
        """
        implicit = set(self.optional_columns) | set(self.auto_stamp_columns)
        implicit.update(col for col in (self.auto_increment, self.soft_delete) if col)
        return tuple(col for col in self.columns if col not in implicit)

    @property
    def generated_columns(self) -> Tuple[str, ...]:
        """The columns never written by inserts or updates."""
        generated = (self.auto_increment,) if self.auto_increment else ()
        return generated + self.auto_stamp_columns
