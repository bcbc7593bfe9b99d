# backend/modules/menu/models/menu_models.py

from sqlalchemy import (Column, Integer, String, ForeignKey, Boolean,
                        Numeric, Text)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    """Sellable product; its preparation screen is its home kitchen station"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    preparation_screen_id = Column(Integer,
                                   ForeignKey("preparation_screens.id"),
                                   nullable=True, index=True)

    preparation_screen = relationship("PreparationScreen",
                                      back_populates="products")
    variants = relationship("ProductVariant", back_populates="product")


class ProductVariant(Base, TimestampMixin):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"),
                        nullable=False, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=True)

    product = relationship("Product", back_populates="variants")


class ProductModifier(Base, TimestampMixin):
    __tablename__ = "product_modifiers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=True)


class PizzaCustomization(Base, TimestampMixin):
    """Pizza flavor or ingredient that can be added to / removed from a half"""
    __tablename__ = "pizza_customizations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    customization_type = Column(String(50), nullable=False, default="INGREDIENT")
