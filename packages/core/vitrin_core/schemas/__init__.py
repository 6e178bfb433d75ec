"""
Pydantic schemas for the translation layer.
"""

from .translation import LanguageResponse, TranslationItem, TranslationRecordResponse

__all__ = [
    "LanguageResponse",
    "TranslationItem",
    "TranslationRecordResponse",
]
