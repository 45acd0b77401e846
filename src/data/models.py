"""
SQLAlchemy models for the save-data backend.

Architecture:
- Account: one row per player account, keyed by a 16-byte uuid
- AccountSession: login tokens resolving to an account
- SystemSaveData: the single account-wide save record
- SessionSaveData: one save record per account per slot
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def utc_now() -> datetime:
    """Generate timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class Account(Base):
    """Player account."""

    __tablename__ = "accounts"

    uuid: Mapped[bytes] = mapped_column(LargeBinary(16), primary_key=True)
    username: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    registered: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    last_activity: Mapped[Optional[datetime]] = mapped_column(
        "lastActivity",
        DateTime(timezone=True),
        nullable=True,
        comment="Touched on every save-data request",
    )


class AccountSession(Base):
    """Login token issued to an account."""

    __tablename__ = "sessions"

    token: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    uuid: Mapped[bytes] = mapped_column(
        LargeBinary(16),
        ForeignKey("accounts.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SystemSaveData(Base):
    """Account-wide save record (one per account)."""

    __tablename__ = "systemSaveData"

    uuid: Mapped[bytes] = mapped_column(
        LargeBinary(16),
        ForeignKey("accounts.uuid", ondelete="CASCADE"),
        primary_key=True,
    )
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


class SessionSaveData(Base):
    """Per-slot session save record."""

    __tablename__ = "sessionSaveData"

    uuid: Mapped[bytes] = mapped_column(
        LargeBinary(16),
        ForeignKey("accounts.uuid", ondelete="CASCADE"),
        primary_key=True,
    )
    slot: Mapped[int] = mapped_column(Integer, primary_key=True)
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )
