"""
Vitrin Database Package.

SQLAlchemy models, session management and migrations for the
translation layer.
"""

__version__ = "0.1.0"

from .models import Base
from .session import close_database, get_session_context, init_database

__all__ = [
    "Base",
    "init_database",
    "close_database",
    "get_session_context",
]
