"""
Translation schemas.

Input and output models for the translation layer.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TranslationItem(BaseModel):
    """One keyed source string for batch translation."""

    key: str = Field(..., min_length=1)
    text: str


class TranslationRecordResponse(BaseModel):
    """Persisted translation row."""

    model_config = ConfigDict(from_attributes=True)

    language_code: str
    translation_key: str
    translation_value: str
    source_text: str | None
    translation_type: str
    context: str
    auto_translated: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LanguageResponse(BaseModel):
    """Site language."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    native_name: str
    flag: str
    is_default: bool
    is_active: bool
    sort_order: int
