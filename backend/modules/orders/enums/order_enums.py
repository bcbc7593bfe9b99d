from enum import Enum


class OrderType(str, Enum):
    DINE_IN = "DINE_IN"
    TAKE_AWAY = "TAKE_AWAY"
    DELIVERY = "DELIVERY"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PreparationStatus(str, Enum):
    """Cooking progress of a single order item"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PreparationScreenStatus(str, Enum):
    """Progress of one preparation screen on one order"""
    PENDING = "PENDING"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"


class PizzaHalf(str, Enum):
    FULL = "FULL"
    HALF_1 = "HALF_1"
    HALF_2 = "HALF_2"


class CustomizationAction(str, Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"


# Orders in these states are closed and never shown on kitchen screens
CLOSED_ORDER_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)
