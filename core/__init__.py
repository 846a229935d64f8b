"""Domain core for the OD request backend: settings, store access and services."""

from . import models
from .db import get_engine, init_database, reset_engine, session_scope
from .errors import ODError
from .settings import get_settings, reset_settings_cache

__all__ = [
    "models",
    "ODError",
    "get_settings",
    "reset_settings_cache",
    "get_engine",
    "init_database",
    "reset_engine",
    "session_scope",
]
