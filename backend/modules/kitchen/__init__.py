# backend/modules/kitchen/__init__.py

"""
Kitchen preparation module: per-screen preparation status of orders,
item preparation toggles and the kitchen ticket read model.
"""

from .models import *
from .schemas import *
from .services import *
from .routes import *

__all__ = [
    # Models
    "PreparationScreen",
    "OrderPreparationScreenStatus",
    # Services
    "KitchenService",
    "OrderItemOperationsService",
    "kitchen_websocket_manager",
    # Schemas
    "KitchenOrderFilter",
    "KitchenOrderView",
    "MyScreenResponse",
    # Routes
    "router",
]
