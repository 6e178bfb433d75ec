"""
Language model definition.
"""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid


class Language(Base, TimestampMixin):
    """
    Language offered by the site.

    Attributes:
        id: Unique language identifier (UUID).
        code: Short language code (e.g. "tr", "en").
        name: English display name.
        native_name: Name in the language itself.
        flag: Flag emoji or icon reference.
        is_default: Whether this is the default display language.
        is_active: Whether the language is selectable.
        sort_order: Position in language pickers.
    """

    __tablename__ = "languages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    native_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    flag: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
