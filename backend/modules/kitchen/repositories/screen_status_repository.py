# backend/modules/kitchen/repositories/screen_status_repository.py

"""
Persistence for per-(order, preparation screen) status records.

The repository flushes its writes; committing or rolling back is left to
the calling service so a screen transition and its item cascade land in
the same transaction.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from core.exceptions import NotFoundError
from modules.orders.enums.order_enums import PreparationScreenStatus
from ..models.kitchen_models import OrderPreparationScreenStatus

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset(
    {
        "status",
        "started_at",
        "started_by_id",
        "completed_at",
        "completed_by_id",
    }
)

_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class ScreenStatusRepository(ABC):
    """Store contract for order preparation screen status records"""

    @abstractmethod
    def find_by_order_and_screen(
        self, order_id: int, screen_id: int
    ) -> Optional[OrderPreparationScreenStatus]:
        ...

    @abstractmethod
    def find_by_order_id(self, order_id: int) -> List[OrderPreparationScreenStatus]:
        ...

    @abstractmethod
    def create_or_update(
        self, order_id: int, screen_id: int, patch: Dict[str, Any]
    ) -> OrderPreparationScreenStatus:
        """Upsert keyed by (order, screen); new records start as PENDING"""

    @abstractmethod
    def update(self, status_id: int, patch: Dict[str, Any]) -> OrderPreparationScreenStatus:
        ...

    @abstractmethod
    def delete_by_order_id(self, order_id: int) -> None:
        ...

    @abstractmethod
    def remove(self, status_id: int) -> None:
        ...


class SQLAlchemyScreenStatusRepository(ScreenStatusRepository):
    """Relational store relying on the (order_id, preparation_screen_id) unique constraint"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(OrderPreparationScreenStatus).options(
            joinedload(OrderPreparationScreenStatus.preparation_screen),
            joinedload(OrderPreparationScreenStatus.started_by),
            joinedload(OrderPreparationScreenStatus.completed_by),
        )

    def find_by_order_and_screen(
        self, order_id: int, screen_id: int
    ) -> Optional[OrderPreparationScreenStatus]:
        return (
            self._query()
            .filter(
                OrderPreparationScreenStatus.order_id == order_id,
                OrderPreparationScreenStatus.preparation_screen_id == screen_id,
            )
            .first()
        )

    def find_by_order_id(self, order_id: int) -> List[OrderPreparationScreenStatus]:
        return (
            self._query()
            .filter(OrderPreparationScreenStatus.order_id == order_id)
            .order_by(OrderPreparationScreenStatus.id)
            .all()
        )

    def create_or_update(
        self, order_id: int, screen_id: int, patch: Dict[str, Any]
    ) -> OrderPreparationScreenStatus:
        self._check_patch(patch)

        insert = _UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert is not None:
            self._insert_if_missing(insert, order_id, screen_id)
        else:
            self._insert_with_savepoint(order_id, screen_id)

        # Lock the row so racing writers on the same pair apply one after another
        record = (
            self.db.query(OrderPreparationScreenStatus)
            .filter(
                OrderPreparationScreenStatus.order_id == order_id,
                OrderPreparationScreenStatus.preparation_screen_id == screen_id,
            )
            .with_for_update()
            .populate_existing()
            .one()
        )
        self._apply_patch(record, patch)
        self.db.flush()

        logger.debug(
            f"Screen status for order {order_id} screen {screen_id} "
            f"is now {record.status.value}"
        )
        return record

    def _insert_if_missing(self, insert, order_id: int, screen_id: int) -> None:
        stmt = (
            insert(OrderPreparationScreenStatus)
            .values(
                order_id=order_id,
                preparation_screen_id=screen_id,
                status=PreparationScreenStatus.PENDING,
            )
            .on_conflict_do_nothing(
                index_elements=["order_id", "preparation_screen_id"]
            )
        )
        self.db.execute(stmt)

    def _insert_with_savepoint(self, order_id: int, screen_id: int) -> None:
        if self.find_by_order_and_screen(order_id, screen_id) is not None:
            return
        try:
            with self.db.begin_nested():
                self.db.add(
                    OrderPreparationScreenStatus(
                        order_id=order_id,
                        preparation_screen_id=screen_id,
                        status=PreparationScreenStatus.PENDING,
                    )
                )
        except IntegrityError:
            # Another writer created the record first; update theirs instead
            logger.info(
                f"Concurrent create for order {order_id} screen {screen_id}, "
                "reusing existing record"
            )

    def update(self, status_id: int, patch: Dict[str, Any]) -> OrderPreparationScreenStatus:
        self._check_patch(patch)
        record = self.db.query(OrderPreparationScreenStatus).filter_by(id=status_id).first()
        if not record:
            raise NotFoundError(
                detail=f"Preparation screen status {status_id} not found"
            )

        self._apply_patch(record, patch)
        self.db.flush()
        return record

    def delete_by_order_id(self, order_id: int) -> None:
        self.db.query(OrderPreparationScreenStatus).filter(
            OrderPreparationScreenStatus.order_id == order_id
        ).delete(synchronize_session=False)
        self.db.flush()

    def remove(self, status_id: int) -> None:
        self.db.query(OrderPreparationScreenStatus).filter(
            OrderPreparationScreenStatus.id == status_id
        ).delete(synchronize_session=False)
        self.db.flush()

    @staticmethod
    def _check_patch(patch: Dict[str, Any]) -> None:
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown screen status fields: {sorted(unknown)}")

    @staticmethod
    def _apply_patch(record: OrderPreparationScreenStatus, patch: Dict[str, Any]) -> None:
        for field, value in patch.items():
            setattr(record, field, value)
