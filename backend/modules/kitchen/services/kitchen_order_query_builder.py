# backend/modules/kitchen/services/kitchen_order_query_builder.py

"""
Read query for kitchen tickets.
"""

from typing import List, Optional
import logging

from sqlalchemy.orm import Query, Session, joinedload

from modules.menu.models.menu_models import Product
from modules.orders.enums.order_enums import CLOSED_ORDER_STATUSES
from modules.orders.models.order_models import (
    Order,
    OrderItem,
    RestaurantTable,
    SelectedPizzaCustomization,
)
from ..models.kitchen_models import OrderPreparationScreenStatus
from ..schemas.kitchen_schemas import KitchenOrderFilter

logger = logging.getLogger(__name__)


class KitchenOrderQueryBuilder:
    """Loads open orders with everything needed to render their tickets"""

    def __init__(self, db: Session):
        self.db = db

    def build_base_query(self) -> Query:
        items = joinedload(Order.order_items)
        screen_statuses = joinedload(Order.preparation_screen_statuses)

        return self.db.query(Order).options(
            items.joinedload(OrderItem.product),
            items.joinedload(OrderItem.product_variant),
            items.joinedload(OrderItem.product_modifiers),
            items.joinedload(OrderItem.selected_pizza_customizations).joinedload(
                SelectedPizzaCustomization.pizza_customization
            ),
            items.joinedload(OrderItem.prepared_by),
            joinedload(Order.table).joinedload(RestaurantTable.area),
            joinedload(Order.customer),
            joinedload(Order.delivery_info),
            screen_statuses.joinedload(OrderPreparationScreenStatus.preparation_screen),
            screen_statuses.joinedload(OrderPreparationScreenStatus.started_by),
            screen_statuses.joinedload(OrderPreparationScreenStatus.completed_by),
        )

    def apply_filters(
        self,
        query: Query,
        filters: KitchenOrderFilter,
        user_screen_id: Optional[int],
    ) -> Query:
        if filters.order_type is not None:
            query = query.filter(Order.order_type == filters.order_type)

        if user_screen_id is not None and not filters.show_all_products:
            query = query.filter(
                Order.order_items.any(
                    OrderItem.product.has(
                        Product.preparation_screen_id == user_screen_id
                    )
                )
            )

        query = query.filter(Order.order_status.notin_(CLOSED_ORDER_STATUSES))

        # Oldest tickets first
        return query.order_by(Order.created_at.asc(), Order.id.asc())

    def fetch_orders(
        self, filters: KitchenOrderFilter, user_screen_id: Optional[int]
    ) -> List[Order]:
        query = self.apply_filters(self.build_base_query(), filters, user_screen_id)
        orders = query.all()
        logger.debug(
            f"Loaded {len(orders)} kitchen orders for screen {user_screen_id}"
        )
        return orders
