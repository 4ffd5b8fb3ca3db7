from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from users_service.database import Base

# UUIDs are stored in their canonical 36-character textual form.
UUID_LENGTH = 36


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    uuid: Mapped[str] = mapped_column(String(UUID_LENGTH), primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Audit fields, unix timestamps in seconds.
    created_by_uuid: Mapped[str] = mapped_column(String(UUID_LENGTH), nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_by_uuid: Mapped[Optional[str]] = mapped_column(String(UUID_LENGTH), nullable=True)
    updated_at: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    def __repr__(self) -> str:
        # hashed_password deliberately left out of the repr
        return f"<User uuid={self.uuid!r} username={self.username!r}>"


# ---------------------------------------------------------------------------
# Follow edges: the (follower, followed) pair is the whole identity of a row
# ---------------------------------------------------------------------------
user_user_follows = Table(
    "user_user_follows",
    Base.metadata,
    Column("follower", String(UUID_LENGTH), ForeignKey("users.uuid", ondelete="CASCADE"), primary_key=True),
    Column("followed", String(UUID_LENGTH), ForeignKey("users.uuid", ondelete="CASCADE"), primary_key=True),
)

# Sources live in another service, so ``followed`` carries no foreign key.
user_source_follows = Table(
    "user_source_follows",
    Base.metadata,
    Column("follower", String(UUID_LENGTH), ForeignKey("users.uuid", ondelete="CASCADE"), primary_key=True),
    Column("followed", String(UUID_LENGTH), primary_key=True, index=True),
)
