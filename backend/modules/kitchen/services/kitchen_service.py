# backend/modules/kitchen/services/kitchen_service.py

"""
Kitchen preparation workflow.

Each preparation screen moves through PENDING -> IN_PREPARATION -> READY
per order, and a cancel steps it back once. Screen transitions cascade to
the screen's items and the order status is re-derived from all screens the
order touches.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from modules.orders.enums.order_enums import (
    OrderStatus,
    PreparationScreenStatus,
    PreparationStatus,
)
from modules.orders.models.order_models import Order, OrderItem
from modules.users.models.user_models import User
from ..exceptions import OrderNotFoundError, ScreenAccessDeniedError
from ..models.kitchen_models import OrderPreparationScreenStatus, PreparationScreen
from ..repositories.screen_status_repository import (
    ScreenStatusRepository,
    SQLAlchemyScreenStatusRepository,
)
from ..schemas.kitchen_schemas import KitchenOrderFilter, KitchenOrderView
from .kitchen_order_mapper import KitchenOrderMapper
from .kitchen_order_query_builder import KitchenOrderQueryBuilder
from .order_item_operations_service import OrderItemOperationsService
from .screen_status_processor import (
    are_all_screens_ready,
    filter_orders_by_screen_status,
    get_unique_screen_ids,
    is_any_screen_in_preparation,
    process_screen_statuses_from_orders,
)

logger = logging.getLogger(__name__)


class KitchenService:
    """Entry point for kitchen screens: ticket reads and screen transitions"""

    def __init__(
        self,
        db: Session,
        screen_status_repository: Optional[ScreenStatusRepository] = None,
    ):
        self.db = db
        self.screen_status_repository = (
            screen_status_repository or SQLAlchemyScreenStatusRepository(db)
        )
        self.item_operations = OrderItemOperationsService(
            db, self.screen_status_repository
        )
        self.query_builder = KitchenOrderQueryBuilder(db)
        self.mapper = KitchenOrderMapper()

    # Reads

    def resolve_user_screen_id(
        self, user_id: int, filters: KitchenOrderFilter
    ) -> Optional[int]:
        """Explicit screen filter, else the user's assigned screen, else None (all screens)"""
        if filters.screen_id is not None:
            return filters.screen_id

        user = self.db.query(User).filter(User.id == user_id).first()
        return user.preparation_screen_id if user else None

    def get_kitchen_orders(
        self, user_id: int, filters: KitchenOrderFilter
    ) -> List[KitchenOrderView]:
        user_screen_id = self.resolve_user_screen_id(user_id, filters)

        orders = self.query_builder.fetch_orders(filters, user_screen_id)
        status_map = process_screen_statuses_from_orders(orders)
        visible_orders = filter_orders_by_screen_status(
            orders, status_map, user_screen_id, filters.show_prepared
        )

        return [
            self.mapper.to_ticket(
                order,
                user_screen_id,
                filters,
                {
                    record.preparation_screen_id: record
                    for record in order.preparation_screen_statuses
                },
            )
            for order in visible_orders
        ]

    def get_user_default_screen(self, user_id: int) -> Optional[PreparationScreen]:
        user = (
            self.db.query(User)
            .options(joinedload(User.preparation_screen))
            .filter(User.id == user_id)
            .first()
        )
        return user.preparation_screen if user else None

    # Item toggles

    def mark_item_prepared(
        self, item_id_or_group_key: str, user_id: int, is_prepared: bool = True
    ) -> List[OrderItem]:
        return self.item_operations.mark_item_prepared(
            item_id_or_group_key, user_id, is_prepared
        )

    # Screen transitions

    def start_preparation_for_screen(
        self, order_id: int, user_id: int
    ) -> OrderPreparationScreenStatus:
        screen_id = self._require_user_screen(user_id)
        self._require_order(order_id)

        try:
            record = self.screen_status_repository.create_or_update(
                order_id,
                screen_id,
                {
                    "status": PreparationScreenStatus.IN_PREPARATION,
                    "started_at": datetime.now(timezone.utc),
                    "started_by_id": user_id,
                },
            )
            self.item_operations.update_items_for_screen_status(
                order_id, screen_id, PreparationStatus.IN_PROGRESS, user_id
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                f"Failed to start preparation of order {order_id} on screen {screen_id}"
            )
            raise

        logger.info(
            f"User {user_id} started order {order_id} on screen {screen_id}"
        )
        self._refresh_order_status(order_id)
        return record

    def complete_preparation_for_screen(
        self, order_id: int, user_id: int
    ) -> OrderPreparationScreenStatus:
        screen_id = self._require_user_screen(user_id)
        self._require_order(order_id)

        try:
            record = self.screen_status_repository.create_or_update(
                order_id,
                screen_id,
                {
                    "status": PreparationScreenStatus.READY,
                    "completed_at": datetime.now(timezone.utc),
                    "completed_by_id": user_id,
                },
            )
            self.item_operations.update_items_for_screen_status(
                order_id, screen_id, PreparationStatus.READY, user_id
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                f"Failed to complete preparation of order {order_id} on screen {screen_id}"
            )
            raise

        logger.info(
            f"User {user_id} completed order {order_id} on screen {screen_id}"
        )
        self._refresh_order_status(order_id)
        return record

    def cancel_preparation_for_screen(
        self, order_id: int, user_id: int
    ) -> Optional[OrderPreparationScreenStatus]:
        """
        Step the user's screen back once on the order.

        IN_PREPARATION goes back to PENDING with its items; READY goes back
        to IN_PREPARATION with its items IN_PROGRESS and the cancelling user
        recorded as their preparer. A PENDING or missing record is left
        alone. The order status is re-derived in every case.
        """
        screen_id = self._require_user_screen(user_id)
        self._require_order(order_id)

        record = self.screen_status_repository.find_by_order_and_screen(
            order_id, screen_id
        )
        previous_status = record.status if record else None

        try:
            if previous_status == PreparationScreenStatus.IN_PREPARATION:
                record = self.screen_status_repository.update(
                    record.id,
                    {
                        "status": PreparationScreenStatus.PENDING,
                        "started_at": None,
                        "started_by_id": None,
                    },
                )
                self.item_operations.update_items_for_screen_status(
                    order_id, screen_id, PreparationStatus.PENDING, None
                )
            elif previous_status == PreparationScreenStatus.READY:
                record = self.screen_status_repository.update(
                    record.id,
                    {
                        "status": PreparationScreenStatus.IN_PREPARATION,
                        "completed_at": None,
                        "completed_by_id": None,
                    },
                )
                self.item_operations.update_items_for_screen_status(
                    order_id,
                    screen_id,
                    PreparationStatus.IN_PROGRESS,
                    user_id,
                    keep_preparer=True,
                )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                f"Failed to cancel preparation of order {order_id} on screen {screen_id}"
            )
            raise

        if previous_status in (
            PreparationScreenStatus.IN_PREPARATION,
            PreparationScreenStatus.READY,
        ):
            logger.info(
                f"User {user_id} cancelled order {order_id} on screen {screen_id} "
                f"({previous_status.value} -> {record.status.value})"
            )

        self._refresh_order_status(order_id)
        return record

    # Order status derivation

    def update_order_status_based_on_screens(self, order_id: int) -> Optional[OrderStatus]:
        """
        Derive the order status from every screen the order touches.

        All touched screens READY gives READY; otherwise any screen
        IN_PREPARATION gives IN_PREPARATION; otherwise an order that was
        READY or IN_PREPARATION falls back to IN_PROGRESS. Anything else
        keeps its status. Writes only when the status changes and returns
        the resulting status (None when the order touches no screen).
        """
        order = (
            self.db.query(Order)
            .options(joinedload(Order.order_items).joinedload(OrderItem.product))
            .filter(Order.id == order_id)
            .first()
        )
        if order is None:
            raise OrderNotFoundError(order_id)

        screen_ids = get_unique_screen_ids(order)
        if not screen_ids:
            return None

        screen_statuses = {
            record.preparation_screen_id: record.status
            for record in self.screen_status_repository.find_by_order_id(order_id)
        }

        current_status = order.order_status
        new_status = current_status
        if are_all_screens_ready(screen_ids, screen_statuses):
            new_status = OrderStatus.READY
        elif is_any_screen_in_preparation(screen_ids, screen_statuses):
            new_status = OrderStatus.IN_PREPARATION
        elif current_status in (OrderStatus.READY, OrderStatus.IN_PREPARATION):
            new_status = OrderStatus.IN_PROGRESS

        if new_status != current_status:
            order.order_status = new_status
            self.db.commit()
            logger.info(
                f"Order {order_id} status {current_status.value} -> {new_status.value}"
            )

        return new_status

    def _refresh_order_status(self, order_id: int) -> None:
        # The screen transition is already committed and stands on its own
        try:
            self.update_order_status_based_on_screens(order_id)
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Could not update status of order {order_id}: {e}")

    def _require_user_screen(self, user_id: int) -> int:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None or user.preparation_screen_id is None:
            logger.warning(f"User {user_id} has no preparation screen assigned")
            raise ScreenAccessDeniedError(
                detail="You do not have a preparation screen assigned"
            )
        return user.preparation_screen_id

    def _require_order(self, order_id: int) -> None:
        exists = self.db.query(Order.id).filter(Order.id == order_id).first()
        if exists is None:
            raise OrderNotFoundError(order_id)
