"""
Database models package.

This module exports all SQLAlchemy models for the Vitrin translation layer.
"""

from .base import Base, TimestampMixin, generate_uuid
from .language import Language
from .system_setting import SystemSetting
from .translation import Translation

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "Language",
    "SystemSetting",
    "Translation",
]
