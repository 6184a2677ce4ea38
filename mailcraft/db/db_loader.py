"""Lookup of database backends by their configured type."""

import importlib
from types import ModuleType

from mailcraft.db.db import DB, DBConfig


def get_db_module(db_type: str) -> ModuleType:
    """Return the module implementing the given database type.

    Accepts both the short form ("json") and the module form ("json_db").
    """
    module_name = db_type.lower()
    if not module_name.endswith("_db"):
        module_name = f"{module_name}_db"
    try:
        return importlib.import_module(f"mailcraft.db.{module_name}")
    except ModuleNotFoundError as e:
        raise ValueError(f"Unknown database type: {db_type}") from e


def get_db(db_config: DBConfig) -> DB:
    """Create a database instance from validated configuration."""
    db_module = get_db_module(db_config.type)
    return db_module.db_from_config(db_config)
