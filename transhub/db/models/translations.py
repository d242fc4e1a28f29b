"""SQLAlchemy models for locales, namespaces and translation rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transhub.db.base import Base
from transhub.utils.datetime import utc_now


class Locale(Base):
    __tablename__ = "locales"
    __table_args__ = (UniqueConstraint("code", name="uq_locales_code"),)

    code: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    translations: Mapped[list["Translation"]] = relationship(back_populates="locale")


class Namespace(Base):
    __tablename__ = "namespaces"
    __table_args__ = (UniqueConstraint("name", name="uq_namespaces_name"),)

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    translations: Mapped[list["Translation"]] = relationship(back_populates="namespace")


class Translation(Base):
    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint(
            "key", "locale_id", "namespace_id", name="uq_translations_key_locale_namespace"
        ),
    )

    key: Mapped[str] = mapped_column(String(191), nullable=False)
    locale_id: Mapped[int] = mapped_column(
        ForeignKey("locales.id", ondelete="CASCADE"), nullable=False
    )
    namespace_id: Mapped[int] = mapped_column(
        ForeignKey("namespaces.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True)
    usage_count: Mapped[int] = mapped_column(Integer, default=0)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    locale: Mapped[Locale] = relationship(back_populates="translations")
    namespace: Mapped[Namespace] = relationship(back_populates="translations")
