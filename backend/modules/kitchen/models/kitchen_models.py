# backend/modules/kitchen/models/kitchen_models.py

"""
Kitchen preparation models: preparation screens and the per-screen
progress record of each order.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean,
    Enum, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from modules.orders.enums.order_enums import PreparationScreenStatus


class PreparationScreen(Base, TimestampMixin):
    """Named kitchen station (e.g. Pizza, Bar) responsible for a set of products"""
    __tablename__ = "preparation_screens"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    products = relationship("Product", back_populates="preparation_screen")
    users = relationship("User", back_populates="preparation_screen")


class OrderPreparationScreenStatus(Base, TimestampMixin):
    """How far along one preparation screen is on one order"""
    __tablename__ = "order_preparation_screen_statuses"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    preparation_screen_id = Column(Integer,
                                   ForeignKey("preparation_screens.id"),
                                   nullable=False, index=True)
    status = Column(
        Enum(PreparationScreenStatus, name="preparation_screen_status"),
        nullable=False,
        default=PreparationScreenStatus.PENDING,
    )

    # Timing
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Staff tracking
    started_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    completed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    order = relationship("Order", back_populates="preparation_screen_statuses")
    preparation_screen = relationship("PreparationScreen")
    started_by = relationship("User", foreign_keys=[started_by_id])
    completed_by = relationship("User", foreign_keys=[completed_by_id])

    # One progress record per (order, screen)
    __table_args__ = (
        UniqueConstraint('order_id', 'preparation_screen_id',
                         name='uq_order_preparation_screen'),
    )
