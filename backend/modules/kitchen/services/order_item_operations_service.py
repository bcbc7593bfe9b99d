# backend/modules/kitchen/services/order_item_operations_service.py

"""
Validated preparation-status changes for order items.
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from modules.menu.models.menu_models import Product
from modules.orders.enums.order_enums import PreparationScreenStatus, PreparationStatus
from modules.orders.models.order_models import OrderItem
from modules.users.models.user_models import User
from ..exceptions import (
    InvalidItemGroupingError,
    InvalidItemStateError,
    InvalidScreenStateError,
    MissingScreenAssignmentError,
    OrderItemsNotFoundError,
    ScreenAccessDeniedError,
)
from ..repositories.screen_status_repository import (
    ScreenStatusRepository,
    SQLAlchemyScreenStatusRepository,
)

logger = logging.getLogger(__name__)


def parse_item_ids(item_id_or_group_key: str) -> List[int]:
    """
    Split a ticket line id (``"12"`` or ``"12,13,14"``) into item ids.

    Blank parts are ignored; anything that is not an integer cannot name
    an existing item and is reported as not found.
    """
    item_ids = []
    for part in str(item_id_or_group_key).split(","):
        part = part.strip()
        if not part:
            continue
        try:
            item_ids.append(int(part))
        except ValueError:
            raise OrderItemsNotFoundError(detail=f"Order item {part} not found") from None

    if not item_ids:
        raise OrderItemsNotFoundError()
    return item_ids


class OrderItemOperationsService:
    """Marks order items prepared / unprepared for the acting kitchen user"""

    def __init__(
        self,
        db: Session,
        screen_status_repository: Optional[ScreenStatusRepository] = None,
    ):
        self.db = db
        self.screen_status_repository = (
            screen_status_repository or SQLAlchemyScreenStatusRepository(db)
        )

    def mark_item_prepared(
        self, item_id_or_group_key: str, acting_user_id: int, is_prepared: bool = True
    ) -> List[OrderItem]:
        """
        Toggle one ticket line between IN_PROGRESS and READY.

        Every grouped item is checked before any is written, so the whole
        line changes or nothing does.

        Raises:
            OrderItemsNotFoundError: an id does not exist
            InvalidItemGroupingError: the items span several orders
            MissingScreenAssignmentError: the product has no preparation screen
            ScreenAccessDeniedError: the user is not assigned to that screen
            InvalidScreenStateError: the screen is not IN_PREPARATION
            InvalidItemStateError: an item is not in the required source state
        """
        item_ids = parse_item_ids(item_id_or_group_key)

        try:
            items = self._load_items(item_ids)
            screen_id = self._validate_items(items)
            self._validate_screen_access(screen_id, acting_user_id)
            self._validate_preparation_state(items, screen_id, is_prepared)

            if is_prepared:
                new_status = PreparationStatus.READY
            else:
                new_status = PreparationStatus.IN_PROGRESS

            now = datetime.now(timezone.utc)
            for item in items:
                self._apply_status(
                    item,
                    new_status,
                    acting_user_id if is_prepared else None,
                    now,
                )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to update order items {item_ids}")
            raise
        except Exception as e:
            self.db.rollback()
            logger.warning(
                f"Rejected prepared={is_prepared} for items {item_ids} "
                f"by user {acting_user_id}: {e}"
            )
            raise

        logger.info(
            f"User {acting_user_id} set items {item_ids} to {new_status.value}"
        )
        return items

    def update_items_for_screen_status(
        self,
        order_id: int,
        screen_id: int,
        new_status: PreparationStatus,
        acting_user_id: Optional[int] = None,
        keep_preparer: bool = False,
    ) -> List[OrderItem]:
        """
        Move every item of the order that belongs to the screen to
        ``new_status`` without per-item checks.

        ``keep_preparer`` records ``acting_user_id`` as preparer on a
        non-READY status. Flushes only; the caller commits.
        """
        items = (
            self.db.query(OrderItem)
            .join(OrderItem.product)
            .filter(
                OrderItem.order_id == order_id,
                Product.preparation_screen_id == screen_id,
            )
            .order_by(OrderItem.id)
            .all()
        )
        if not items:
            return []

        now = datetime.now(timezone.utc)
        for item in items:
            self._apply_status(item, new_status, acting_user_id, now, keep_preparer)
        self.db.flush()

        logger.debug(
            f"Set {len(items)} items of order {order_id} on screen {screen_id} "
            f"to {new_status.value}"
        )
        return items

    def _load_items(self, item_ids: List[int]) -> List[OrderItem]:
        items = (
            self.db.query(OrderItem)
            .options(joinedload(OrderItem.product))
            .filter(OrderItem.id.in_(item_ids))
            .order_by(OrderItem.id)
            .all()
        )

        missing = set(item_ids) - {item.id for item in items}
        if not items or missing:
            raise OrderItemsNotFoundError(
                detail=f"Order items not found: {sorted(missing) or item_ids}"
            )
        return items

    @staticmethod
    def _validate_items(items: List[OrderItem]) -> int:
        if len({item.order_id for item in items}) > 1:
            raise InvalidItemGroupingError()

        screen_ids = {
            item.product.preparation_screen_id if item.product else None
            for item in items
        }
        if None in screen_ids:
            raise MissingScreenAssignmentError()
        if len(screen_ids) > 1:
            raise InvalidItemGroupingError(
                detail="Items belong to different preparation screens"
            )
        return screen_ids.pop()

    def _validate_screen_access(self, screen_id: int, acting_user_id: int) -> None:
        user = self.db.query(User).filter(User.id == acting_user_id).first()
        if user is None or user.preparation_screen_id != screen_id:
            raise ScreenAccessDeniedError()

    def _validate_preparation_state(
        self, items: List[OrderItem], screen_id: int, is_prepared: bool
    ) -> None:
        record = self.screen_status_repository.find_by_order_and_screen(
            items[0].order_id, screen_id
        )
        if record is None or record.status != PreparationScreenStatus.IN_PREPARATION:
            raise InvalidScreenStateError()

        if is_prepared:
            if any(item.preparation_status != PreparationStatus.IN_PROGRESS for item in items):
                raise InvalidItemStateError(
                    detail="Only items in progress can be marked as prepared"
                )
        elif any(item.preparation_status != PreparationStatus.READY for item in items):
            raise InvalidItemStateError(
                detail="Only ready items can be returned to preparation"
            )

    @staticmethod
    def _apply_status(
        item: OrderItem,
        new_status: PreparationStatus,
        acting_user_id: Optional[int],
        now: datetime,
        keep_preparer: bool = False,
    ) -> None:
        item.preparation_status = new_status
        item.status_changed_at = now

        if new_status == PreparationStatus.READY and acting_user_id is not None:
            item.prepared_at = now
            item.prepared_by_id = acting_user_id
        elif new_status in (PreparationStatus.IN_PROGRESS, PreparationStatus.PENDING):
            item.prepared_at = None
            item.prepared_by_id = acting_user_id if keep_preparer else None
