from .order_models import (
    Area,
    RestaurantTable,
    Customer,
    DeliveryInfo,
    Order,
    OrderItem,
    SelectedPizzaCustomization,
    order_item_modifiers,
)

__all__ = [
    "Area",
    "RestaurantTable",
    "Customer",
    "DeliveryInfo",
    "Order",
    "OrderItem",
    "SelectedPizzaCustomization",
    "order_item_modifiers",
]
