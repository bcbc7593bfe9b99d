# backend/modules/users/models/user_models.py

from sqlalchemy import Column, Integer, String, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Staff user; kitchen users are assigned to at most one preparation screen"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True, unique=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(50), nullable=False, default="waiter")
    is_active = Column(Boolean, nullable=False, default=True)
    preparation_screen_id = Column(Integer,
                                   ForeignKey("preparation_screens.id"),
                                   nullable=True, index=True)

    preparation_screen = relationship("PreparationScreen",
                                      back_populates="users")
