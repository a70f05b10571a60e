from clinic.database.async_db import (
    create_async_database_engine,
    create_tables,
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_session_factory,
    init_engine,
)

__all__ = [
    "create_async_database_engine",
    "create_tables",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_session_factory",
    "init_engine",
]
