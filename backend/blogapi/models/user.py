"""
Blog API - User SQLAlchemy Models
=================================

What:  ORM models for the `users` and `user_roles` tables (credential store).
How:   Inherit from the credential Base; Alembic reads these for migrations.
Who:   Used by UserRepository, the access guard and the authenticator.

Table Design:
    - Integer identity primary key assigned by the store
    - username and email each carry a unique constraint
    - password_hash holds a bcrypt hash, never the plain password
    - roles live in user_roles (one row per role) and go away with the user
"""

import enum
from datetime import datetime, timezone
from typing import List, Set

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.database import Base


class Role(str, enum.Enum):
    """
    Closed set of roles used for access control.

    USER may create content and modify what they authored.
    ADMIN passes every ownership check and may delete users.
    """

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created on registration with role USER
        2. Only timestamps change afterwards (admin bootstrap may add ADMIN)
        3. Hard-deleted by an admin; posts and comments keep their author_id
    """

    __tablename__ = "users"

    # SQLite only autoincrements INTEGER PRIMARY KEY columns
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Public handle, unique",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Lower-cased email address, unique",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # selectin: roles are needed on every authenticated request and async
    # sessions cannot lazy-load
    role_entries: Mapped[List["UserRole"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def roles(self) -> Set[Role]:
        return {entry.role for entry in self.role_entries}

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def grant(self, role: Role) -> None:
        """Adds a role if the user does not hold it yet."""
        if not self.has_role(role):
            self.role_entries.append(UserRole(role=role))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class UserRole(Base):
    """One role held by one user."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer(), "sqlite"),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", native_enum=False, length=20),
        primary_key=True,
    )

    user: Mapped[User] = relationship(back_populates="role_entries")

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role='{self.role.value}')>"
