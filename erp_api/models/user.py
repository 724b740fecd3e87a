"""
models/user.py
--------------
User ORM model with roles, claims and company binding.

Role design:
  - Roles are rows in `roles`, attached through the `user_roles` table.
  - 'Admin' manages users and permissions within its own company and passes
    every authorization policy.

Claims:
  - `user_claims` holds typed key/value facts about a user. Permission grants
    are rows with claim_type="perm"; the value is a catalog permission.

Activation:
  - provisioned: created by an admin, not yet invited
  - invited:     one-time artifacts have been issued (invited_at is set)
  - active:      email confirmed and password set

hashed_password stores bcrypt hashes only and is NULL until the user has
chosen a password. Plain text is never stored and never logged.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_api.db.base import Base, TimestampMixin, generate_uuid
from erp_api.core.permissions import PERMISSION_CLAIM_TYPE


class ActivationState(str, PyEnum):
    provisioned = "provisioned"
    invited = "invited"
    active = "active"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class UserClaim(Base):
    __tablename__ = "user_claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    claim_type: Mapped[str] = mapped_column(String(64), nullable=False)
    claim_value: Mapped[str] = mapped_column(String(256), nullable=False)

    def __repr__(self) -> str:
        return f"<UserClaim {self.claim_type}={self.claim_value}>"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    company_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    invited_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Eager-loaded: both collections are read on almost every request and
    # lazy loading is not available inside an async session.
    roles: Mapped[list[Role]] = relationship(
        secondary=user_roles, lazy="selectin", order_by=Role.name
    )
    claims: Mapped[list[UserClaim]] = relationship(
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=UserClaim.id,
    )

    @property
    def tenant_id(self) -> int:
        return self.company_id or 0

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    @property
    def permission_values(self) -> list[str]:
        return [
            claim.claim_value
            for claim in self.claims
            if claim.claim_type == PERMISSION_CLAIM_TYPE
        ]

    @property
    def activation_state(self) -> ActivationState:
        if self.email_confirmed and self.hashed_password:
            return ActivationState.active
        if self.invited_at is not None:
            return ActivationState.invited
        return ActivationState.provisioned

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} company_id={self.company_id}>"
