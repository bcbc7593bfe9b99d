from .kitchen_schemas import (
    DeliveryDetails,
    DineInDetails,
    KitchenOrderFilter,
    KitchenOrderItemView,
    KitchenOrderView,
    MarkItemPreparedRequest,
    MyScreenResponse,
    PizzaCustomizationSummary,
    PreparationScreenView,
    PreparedByUser,
    ScreenStatusView,
    TakeAwayDetails,
)

__all__ = [
    "DeliveryDetails",
    "DineInDetails",
    "KitchenOrderFilter",
    "KitchenOrderItemView",
    "KitchenOrderView",
    "MarkItemPreparedRequest",
    "MyScreenResponse",
    "PizzaCustomizationSummary",
    "PreparationScreenView",
    "PreparedByUser",
    "ScreenStatusView",
    "TakeAwayDetails",
]
