##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
The `db` package contains the active-record layer of ActiveRow.

Modules:
    schema.py: Defines `ModelSchema` and `ForeignKey`, the table metadata of a model.
    model.py: Defines `Model`, the active-record base class.
    instance_registry.py: Defines `InstanceRegistry`, the identity map of loaded models.
    connection_registry.py: Defines `ConnectionRegistry`, the cache of named storage executors.
    context.py: Defines `DatabaseContext`, which owns one registry of each kind.
"""

from activerow.db.connection_registry import ConnectionRegistry
from activerow.db.context import DatabaseContext
from activerow.db.instance_registry import InstanceRegistry
from activerow.db.model import Model
from activerow.db.schema import ForeignKey, ModelSchema


__all__ = ["ConnectionRegistry", "DatabaseContext", "ForeignKey", "InstanceRegistry", "Model", "ModelSchema"]
