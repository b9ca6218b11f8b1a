# KPop Idol API Core Module
from .config import Settings, UserCredential, get_settings, settings
from .database import (
    Base,
    build_engine,
    build_session_maker,
    check_db_connection,
    get_db,
    init_db,
)
from .logging import setup_logging

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "UserCredential",
    "setup_logging",
    "Base",
    "build_engine",
    "build_session_maker",
    "get_db",
    "init_db",
    "check_db_connection",
]
