"""
Utility functions and helpers
"""

from .logging import setup_logging, get_logger, LoggerMixin
from .database import (
    get_db,
    create_tables,
    check_database_connection,
    get_database_info,
    get_engine,
    get_session_local
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "get_db",
    "create_tables",
    "check_database_connection",
    "get_database_info",
    "get_engine",
    "get_session_local"
]
