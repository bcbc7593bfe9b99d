from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Text, Table, Enum)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from ..enums.order_enums import (OrderType, OrderStatus, PreparationStatus,
                                 PizzaHalf, CustomizationAction)


order_item_modifiers = Table(
    'order_item_modifiers',
    Base.metadata,
    Column('order_item_id', Integer,
           ForeignKey('order_items.id', ondelete='CASCADE'), primary_key=True),
    Column('product_modifier_id', Integer,
           ForeignKey('product_modifiers.id'), primary_key=True)
)


class Area(Base, TimestampMixin):
    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)

    tables = relationship("RestaurantTable", back_populates="area")


class RestaurantTable(Base, TimestampMixin):
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    area_id = Column(Integer, ForeignKey("areas.id"), nullable=False, index=True)

    area = relationship("Area", back_populates="tables")


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    whatsapp_phone_number = Column(String(30), nullable=True)

    orders = relationship("Order", back_populates="customer")


class DeliveryInfo(Base, TimestampMixin):
    __tablename__ = "delivery_info"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, unique=True)
    full_address = Column(Text, nullable=True)
    recipient_name = Column(String(200), nullable=True)
    recipient_phone = Column(String(30), nullable=True)

    order = relationship("Order", back_populates="delivery_info")


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    shift_order_number = Column(Integer, nullable=False)
    order_type = Column(Enum(OrderType, name="order_type"),
                        nullable=False, index=True)
    order_status = Column(Enum(OrderStatus, name="order_status"),
                          nullable=False, default=OrderStatus.PENDING,
                          index=True)
    notes = Column(Text, nullable=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)

    order_items = relationship("OrderItem", back_populates="order",
                               order_by="OrderItem.id",
                               cascade="all, delete-orphan")
    table = relationship("RestaurantTable")
    customer = relationship("Customer", back_populates="orders")
    delivery_info = relationship("DeliveryInfo", back_populates="order",
                                 uselist=False, cascade="all, delete-orphan")
    preparation_screen_statuses = relationship(
        "OrderPreparationScreenStatus", back_populates="order",
        cascade="all, delete-orphan", passive_deletes=True
    )


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"),
                        nullable=False, index=True)
    product_variant_id = Column(Integer, ForeignKey("product_variants.id"),
                                nullable=True)
    preparation_status = Column(
        Enum(PreparationStatus, name="preparation_status"),
        nullable=False,
        default=PreparationStatus.PENDING,
        index=True
    )
    preparation_notes = Column(Text, nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)
    prepared_at = Column(DateTime(timezone=True), nullable=True)
    prepared_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product")
    product_variant = relationship("ProductVariant")
    product_modifiers = relationship("ProductModifier",
                                     secondary=order_item_modifiers,
                                     order_by="ProductModifier.id")
    selected_pizza_customizations = relationship(
        "SelectedPizzaCustomization", back_populates="order_item",
        order_by="SelectedPizzaCustomization.id",
        cascade="all, delete-orphan"
    )
    prepared_by = relationship("User", foreign_keys=[prepared_by_id])


class SelectedPizzaCustomization(Base, TimestampMixin):
    __tablename__ = "selected_pizza_customizations"

    id = Column(Integer, primary_key=True, index=True)
    order_item_id = Column(Integer,
                           ForeignKey("order_items.id", ondelete="CASCADE"),
                           nullable=False, index=True)
    pizza_customization_id = Column(Integer,
                                    ForeignKey("pizza_customizations.id"),
                                    nullable=False)
    half = Column(Enum(PizzaHalf, name="pizza_half"), nullable=False,
                  default=PizzaHalf.FULL)
    action = Column(Enum(CustomizationAction, name="customization_action"),
                    nullable=False, default=CustomizationAction.ADD)

    order_item = relationship("OrderItem",
                              back_populates="selected_pizza_customizations")
    pizza_customization = relationship("PizzaCustomization")
