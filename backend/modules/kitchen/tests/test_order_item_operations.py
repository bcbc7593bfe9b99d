"""
Tests for validated item preparation toggles.
"""

import pytest

from modules.kitchen.exceptions import (
    InvalidItemGroupingError,
    InvalidItemStateError,
    InvalidScreenStateError,
    MissingScreenAssignmentError,
    OrderItemsNotFoundError,
    ScreenAccessDeniedError,
)
from modules.kitchen.services.order_item_operations_service import (
    OrderItemOperationsService,
    parse_item_ids,
)
from modules.orders.enums.order_enums import PreparationScreenStatus, PreparationStatus
from modules.orders.models import OrderItem

from factories import OrderFactory, OrderItemFactory, ScreenStatusFactory


def statuses(db_session, items):
    db_session.expire_all()
    return [
        db_session.get(OrderItem, item_id).preparation_status
        for item_id in [item.id for item in items]
    ]


@pytest.fixture
def order(kitchen):
    return OrderFactory()


@pytest.fixture
def preparing(kitchen, order):
    """The pizza screen is actively preparing the order."""
    return ScreenStatusFactory(
        order=order,
        preparation_screen=kitchen.pizza_screen,
        status=PreparationScreenStatus.IN_PREPARATION,
    )


class TestParseItemIds:
    def test_single_and_composite(self):
        assert parse_item_ids("12") == [12]
        assert parse_item_ids("12,13, 14") == [12, 13, 14]

    def test_blank_parts_are_ignored(self):
        assert parse_item_ids("12,,13,") == [12, 13]

    @pytest.mark.parametrize("key", ["", ",", "abc", "12,x"])
    def test_unusable_keys_are_not_found(self, key):
        with pytest.raises(OrderItemsNotFoundError):
            parse_item_ids(key)


class TestMarkItemPrepared:
    def test_marks_in_progress_item_ready(self, db_session, kitchen, order, preparing):
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
        )

        OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.pizza_cook.id)

        db_session.refresh(item)
        assert item.preparation_status == PreparationStatus.READY
        assert item.prepared_by_id == kitchen.pizza_cook.id
        assert item.prepared_at is not None
        assert item.status_changed_at is not None

    def test_unmark_returns_item_to_progress(self, db_session, kitchen, order, preparing):
        item = OrderItemFactory(
            order=order,
            product=kitchen.pizza,
            preparation_status=PreparationStatus.READY,
            prepared_by=kitchen.pizza_cook,
        )

        OrderItemOperationsService(db_session).mark_item_prepared(
            str(item.id), kitchen.pizza_cook.id, is_prepared=False
        )

        db_session.refresh(item)
        assert item.preparation_status == PreparationStatus.IN_PROGRESS
        assert item.prepared_by_id is None
        assert item.prepared_at is None

    def test_group_key_marks_every_item(self, db_session, kitchen, order, preparing):
        items = [
            OrderItemFactory(
                order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
            )
            for _ in range(3)
        ]
        key = ",".join(str(item.id) for item in items)

        OrderItemOperationsService(db_session).mark_item_prepared(key, kitchen.pizza_cook.id)

        assert statuses(db_session, items) == [PreparationStatus.READY] * 3

    @pytest.mark.parametrize(
        "current, is_prepared",
        [
            (PreparationStatus.PENDING, True),
            (PreparationStatus.READY, True),
            (PreparationStatus.PENDING, False),
            (PreparationStatus.IN_PROGRESS, False),
        ],
    )
    def test_no_skip_transition(self, db_session, kitchen, order, preparing, current, is_prepared):
        item = OrderItemFactory(order=order, product=kitchen.pizza, preparation_status=current)

        with pytest.raises(InvalidItemStateError):
            OrderItemOperationsService(db_session).mark_item_prepared(
                str(item.id), kitchen.pizza_cook.id, is_prepared
            )

        assert statuses(db_session, [item]) == [current]

    @pytest.mark.parametrize(
        "screen_status", [None, PreparationScreenStatus.PENDING, PreparationScreenStatus.READY]
    )
    def test_screen_gate(self, db_session, kitchen, order, screen_status):
        if screen_status is not None:
            ScreenStatusFactory(
                order=order, preparation_screen=kitchen.pizza_screen, status=screen_status
            )
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
        )

        with pytest.raises(InvalidScreenStateError):
            OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.pizza_cook.id)

        assert statuses(db_session, [item]) == [PreparationStatus.IN_PROGRESS]

    def test_group_is_all_or_nothing(self, db_session, kitchen, order, preparing):
        items = [
            OrderItemFactory(
                order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
            ),
            OrderItemFactory(
                order=order, product=kitchen.pizza, preparation_status=PreparationStatus.PENDING
            ),
            OrderItemFactory(
                order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
            ),
        ]
        key = ",".join(str(item.id) for item in items)

        with pytest.raises(InvalidItemStateError):
            OrderItemOperationsService(db_session).mark_item_prepared(key, kitchen.pizza_cook.id)

        assert statuses(db_session, items) == [
            PreparationStatus.IN_PROGRESS,
            PreparationStatus.PENDING,
            PreparationStatus.IN_PROGRESS,
        ]


class TestPreconditions:
    def test_unknown_item(self, db_session, kitchen):
        with pytest.raises(OrderItemsNotFoundError):
            OrderItemOperationsService(db_session).mark_item_prepared("9999", kitchen.pizza_cook.id)

    def test_partially_unknown_group(self, db_session, kitchen, order, preparing):
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
        )

        with pytest.raises(OrderItemsNotFoundError):
            OrderItemOperationsService(db_session).mark_item_prepared(
                f"{item.id},9999", kitchen.pizza_cook.id
            )

        assert statuses(db_session, [item]) == [PreparationStatus.IN_PROGRESS]

    def test_items_from_different_orders(self, db_session, kitchen, order):
        first = OrderItemFactory(order=order, product=kitchen.pizza)
        second = OrderItemFactory(order=OrderFactory(), product=kitchen.pizza)

        with pytest.raises(InvalidItemGroupingError):
            OrderItemOperationsService(db_session).mark_item_prepared(
                f"{first.id},{second.id}", kitchen.pizza_cook.id
            )

    def test_product_without_screen(self, db_session, kitchen, order):
        item = OrderItemFactory(order=order, product=kitchen.bread)

        with pytest.raises(MissingScreenAssignmentError):
            OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.pizza_cook.id)

    def test_user_on_another_screen(self, db_session, kitchen, order, preparing):
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
        )

        with pytest.raises(ScreenAccessDeniedError):
            OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.bar_cook.id)

    def test_user_without_screen(self, db_session, kitchen, order, preparing):
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.IN_PROGRESS
        )

        with pytest.raises(ScreenAccessDeniedError):
            OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.waiter.id)

    def test_grouping_checked_before_access(self, db_session, kitchen, order):
        first = OrderItemFactory(order=order, product=kitchen.pizza)
        second = OrderItemFactory(order=OrderFactory(), product=kitchen.pizza)

        # The waiter would also be refused, but the grouping error comes first
        with pytest.raises(InvalidItemGroupingError):
            OrderItemOperationsService(db_session).mark_item_prepared(
                f"{first.id},{second.id}", kitchen.waiter.id
            )

    def test_access_checked_before_screen_state(self, db_session, kitchen, order):
        item = OrderItemFactory(order=order, product=kitchen.pizza)

        with pytest.raises(ScreenAccessDeniedError):
            OrderItemOperationsService(db_session).mark_item_prepared(str(item.id), kitchen.bar_cook.id)


class TestUpdateItemsForScreenStatus:
    def test_only_items_of_the_screen_change(self, db_session, kitchen, order):
        pizza_item = OrderItemFactory(order=order, product=kitchen.pizza)
        beer_item = OrderItemFactory(order=order, product=kitchen.beer)
        other_order_item = OrderItemFactory(product=kitchen.pizza)

        service = OrderItemOperationsService(db_session)
        updated = service.update_items_for_screen_status(
            order.id, kitchen.pizza_screen.id, PreparationStatus.READY, kitchen.pizza_cook.id
        )
        db_session.commit()

        assert [item.id for item in updated] == [pizza_item.id]
        assert statuses(db_session, [pizza_item, beer_item, other_order_item]) == [
            PreparationStatus.READY,
            PreparationStatus.PENDING,
            PreparationStatus.PENDING,
        ]
        assert db_session.get(OrderItem, pizza_item.id).prepared_by_id == kitchen.pizza_cook.id

    def test_regression_clears_preparer(self, db_session, kitchen, order):
        item = OrderItemFactory(
            order=order,
            product=kitchen.pizza,
            preparation_status=PreparationStatus.READY,
            prepared_by=kitchen.pizza_cook,
        )

        OrderItemOperationsService(db_session).update_items_for_screen_status(
            order.id, kitchen.pizza_screen.id, PreparationStatus.PENDING, None
        )
        db_session.commit()

        db_session.refresh(item)
        assert item.preparation_status == PreparationStatus.PENDING
        assert item.prepared_by_id is None
        assert item.prepared_at is None

    def test_keep_preparer(self, db_session, kitchen, order):
        item = OrderItemFactory(
            order=order, product=kitchen.pizza, preparation_status=PreparationStatus.READY
        )

        OrderItemOperationsService(db_session).update_items_for_screen_status(
            order.id,
            kitchen.pizza_screen.id,
            PreparationStatus.IN_PROGRESS,
            kitchen.pizza_cook.id,
            keep_preparer=True,
        )
        db_session.commit()

        db_session.refresh(item)
        assert item.preparation_status == PreparationStatus.IN_PROGRESS
        assert item.prepared_by_id == kitchen.pizza_cook.id
        assert item.prepared_at is None

    def test_no_matching_items(self, db_session, kitchen, order):
        OrderItemFactory(order=order, product=kitchen.beer)

        updated = OrderItemOperationsService(db_session).update_items_for_screen_status(
            order.id, kitchen.pizza_screen.id, PreparationStatus.READY, kitchen.pizza_cook.id
        )

        assert updated == []
