from .kitchen_service import KitchenService
from .kitchen_order_mapper import KitchenOrderMapper
from .kitchen_order_query_builder import KitchenOrderQueryBuilder
from .order_item_operations_service import OrderItemOperationsService
from .kitchen_websocket_manager import KitchenWebSocketManager, kitchen_websocket_manager

__all__ = [
    "KitchenService",
    "KitchenOrderMapper",
    "KitchenOrderQueryBuilder",
    "OrderItemOperationsService",
    "KitchenWebSocketManager",
    "kitchen_websocket_manager",
]
