"""
models/credential.py
--------------------
Credential artifacts attached to a user.

OneTimeToken:
  Single-use, time-limited tokens for email confirmation and password reset.
  Only a SHA-256 digest of the value is stored; the raw value is returned to
  the caller once, at issuance. Issuing a new token does not revoke earlier
  ones of the same kind; each expires on its own schedule.

ExternalLogin:
  Link between a user and an identity held by an external provider
  (e.g. provider="google", provider_key=<subject id>).
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from erp_api.db.base import Base, TimestampMixin


class ArtifactKind(str, PyEnum):
    email_confirmation = "email_confirmation"
    password_reset = "password_reset"


class OneTimeToken(Base, TimestampMixin):
    __tablename__ = "one_time_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    consumed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<OneTimeToken id={self.id} user_id={self.user_id} kind={self.kind}>"


class ExternalLogin(Base, TimestampMixin):
    __tablename__ = "external_logins"
    __table_args__ = (UniqueConstraint("provider", "provider_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    provider: Mapped[str] = mapped_column(String(64), nullable=False)
    provider_key: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ExternalLogin {self.provider}:{self.provider_key} user_id={self.user_id}>"
