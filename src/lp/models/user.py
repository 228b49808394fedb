"""User model."""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from lp.db.base import Base


class UserRole(enum.Enum):
    """Account role."""

    user = "user"
    admin = "admin"


class User(Base):
    """Account created on first sign-in through the identity provider."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    image = Column(String(2048), nullable=True)
    role = Column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.user
    )
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    plans = relationship("LearningPlan", back_populates="owner")
