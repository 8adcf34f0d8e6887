##############################################################################
# Copyright (c) ActiveRow Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to ActiveRow.
##############################################################################

"""
The `executors` package runs statements against databases on behalf of models.

Modules:
    executor_base.py: Defines `StorageExecutor`, the interface every executor implements.
    executor_factory.py: Maps `database_type` settings to executor classes.
    sqlalchemy_executor.py: SQLAlchemy Core executor for server databases.
    where.py: Normalizes lookup filters into SQL conditions.

Subpackages:
    sqlite: The stdlib `sqlite3` executor.
"""
