"""
User and UserProfile models for registered accounts.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class UserProfile(Base):
    """
    Display attributes of a user, owned exclusively by one User.

    Attributes:
        id: Unique identifier for the profile
        full_name: Full name shown on the user's pages
        email_address: Contact email
        mobile_number: Contact phone number
    """

    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=True)
    email_address = Column(String(255), nullable=True)
    mobile_number = Column(String(32), nullable=True)

    user = relationship("User", back_populates="profile", uselist=False, lazy="raise")

    def __repr__(self) -> str:
        return f"<UserProfile(id={self.id}, full_name='{self.full_name}')>"


class User(Base, TimestampMixin):
    """
    User model representing a registered account.

    Attributes:
        id: Unique identifier for the user
        username: Login name, unique across all users
        password: Salted password hash
        profile: One-to-one profile, created and deleted with the user
        images: Images owned by the user (loaded explicitly)
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    profile_id = Column(Integer, ForeignKey("user_profiles.id"), nullable=True, unique=True)

    profile = relationship(
        "UserProfile",
        back_populates="user",
        cascade="all, delete-orphan",
        single_parent=True,
        lazy="joined",
    )
    images = relationship("Image", back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
