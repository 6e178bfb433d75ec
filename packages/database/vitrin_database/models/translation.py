"""
Translation model definition.

This module defines the Translation model for storing translated
catalog strings keyed by language and semantic translation key.
"""

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid


class Translation(Base, TimestampMixin):
    """
    Translated catalog string.

    One row per (language_code, translation_key). The ``tr`` row holds the
    canonical Turkish text; every other language holds a translation of it.

    Attributes:
        id: Unique translation identifier (UUID).
        language_code: Language code (e.g. "tr", "en", "ar").
        translation_key: Dot-delimited semantic key (e.g. "product.42.name").
        translation_value: Translated text (canonical text for "tr").
        source_text: Turkish text the translation was produced from.
        translation_type: Call-site classification (product/category/dynamic).
        context: Free-form context tag, mirrors translation_type.
        auto_translated: True when produced by the translation provider.
    """

    __tablename__ = "translations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    language_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    translation_key: Mapped[str] = mapped_column(String(255), nullable=False)
    translation_value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source_text: Mapped[str | None] = mapped_column(Text)
    translation_type: Mapped[str] = mapped_column(String(50), nullable=False, default="dynamic")
    context: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    auto_translated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Constraints
    __table_args__ = (
        UniqueConstraint("language_code", "translation_key", name="uq_translation_lang_key"),
    )
