##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
Module of all ActiveRow-specific exception types.

Misuse of a model (unknown columns, writes to read-only models, invalid data)
is always raised to the caller. Storage failures are not exceptions: `save()`,
`update()` and `delete()` report them by returning False.
"""

from typing import Iterable


__all__ = (
    "ActiveRowError",
    "ReadOnlyModelError",
    "UnknownColumnError",
    "NotForeignColumnError",
    "ForeignConstraintError",
    "MissingColumnError",
    "InvalidArgumentError",
    "InvalidDataError",
    "ModelLogicError",
    "SchemaError",
    "ConnectionNotConfiguredError",
    "ExecutorNotSupportedError",
)


def _format_columns(columns: Iterable[str]) -> str:
    return ", ".join(f"'{column}'" for column in columns)


class ActiveRowError(Exception):
    """
    Base class for every exception raised by ActiveRow.
    """


class ReadOnlyModelError(ActiveRowError):
    """
    Exception to signal a mutation attempted on a read-only model.
    """

    def __init__(self, model_name: str = None):
        msg = f"Model '{model_name}' is read-only" if model_name else "Model is read-only"
        super().__init__(msg)


class UnknownColumnError(ActiveRowError):
    """
    Exception to signal that one or more columns are not declared in a model's schema.

    Attributes:
        columns: The offending column names.
    """

    def __init__(self, columns: Iterable[str] = ()):
        self.columns = [columns] if isinstance(columns, str) else list(columns)
        if self.columns:
            msg = f"Unknown column(s): {_format_columns(self.columns)}"
        else:
            msg = "Unknown column"
        super().__init__(msg)


class NotForeignColumnError(ActiveRowError):
    """
    Exception to signal that foreign resolution was attempted on a column
    that is not a foreign key.
    """

    def __init__(self, column: str = None):
        self.column = column
        msg = f"Column '{column}' is not a foreign key" if column else "Column is not a foreign key"
        super().__init__(msg)


class ForeignConstraintError(ActiveRowError):
    """
    Exception to signal that the row referenced by a foreign key does not exist.

    Attributes:
        model_name: The name of the model owning the foreign key.
        column: The foreign key column.
    """

    def __init__(self, model_name: str, column: str):
        self.model_name = model_name
        self.column = column
        super().__init__(f"Foreign constraint fails for column '{column}' in model '{model_name}'")


class MissingColumnError(ActiveRowError):
    """
    Exception to signal that required columns are absent from data being saved.

    Attributes:
        columns: The missing column names.
    """

    def __init__(self, columns: Iterable[str]):
        self.columns = list(columns)
        super().__init__(f"Missing required column(s): {_format_columns(self.columns)}")


class InvalidArgumentError(ActiveRowError, ValueError):
    """
    Exception to signal a malformed lookup filter or a null lookup.
    """


class InvalidDataError(ActiveRowError, ValueError):
    """
    Exception to signal that a model's validation hook rejected the data.
    """

    def __init__(self, msg: str = "Invalid data"):
        super().__init__(msg)


class ModelLogicError(ActiveRowError):
    """
    Exception to signal an operation that is invalid for the current state of a
    model, e.g. updating a fresh model or using an unknown soft delete mode.
    """


class SchemaError(ActiveRowError):
    """
    Exception to signal an inconsistent model schema declaration.
    """


class ConnectionNotConfiguredError(ActiveRowError):
    """
    Exception to signal that a named connection is absent from the configuration
    or lacks required settings.
    """


class ExecutorNotSupportedError(ActiveRowError):
    """
    Exception to signal that an unsupported storage executor was requested.
    """
