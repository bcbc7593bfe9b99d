"""
Tests for kitchen ticket mapping and item grouping.
"""

from datetime import datetime, timezone

import pytest

from modules.kitchen.models import OrderPreparationScreenStatus, PreparationScreen
from modules.kitchen.schemas import (
    DeliveryDetails,
    DineInDetails,
    KitchenOrderFilter,
    TakeAwayDetails,
)
from modules.kitchen.services.kitchen_order_mapper import KitchenOrderMapper
from modules.menu.models import PizzaCustomization, Product, ProductModifier, ProductVariant
from modules.orders.enums.order_enums import (
    CustomizationAction,
    OrderStatus,
    OrderType,
    PizzaHalf,
    PreparationScreenStatus,
    PreparationStatus,
)
from modules.orders.models import (
    Area,
    Customer,
    DeliveryInfo,
    Order,
    OrderItem,
    RestaurantTable,
    SelectedPizzaCustomization,
)
from modules.users.models import User

PIZZA = 1
BAR = 2


@pytest.fixture
def mapper():
    return KitchenOrderMapper()


@pytest.fixture
def pizza():
    return Product(id=100, name="Margherita", preparation_screen_id=PIZZA)


@pytest.fixture
def beer():
    return Product(id=200, name="Beer", preparation_screen_id=BAR)


def make_item(item_id, product, **kwargs):
    kwargs.setdefault("preparation_status", PreparationStatus.PENDING)
    return OrderItem(id=item_id, product=product, product_id=product.id if product else None, **kwargs)


def make_order(items, order_type=OrderType.DINE_IN, **kwargs):
    return Order(
        id=1,
        shift_order_number=7,
        order_type=order_type,
        order_status=OrderStatus.PENDING,
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        order_items=items,
        **kwargs,
    )


def screen_record(screen_id, status, name="Screen"):
    return OrderPreparationScreenStatus(
        preparation_screen_id=screen_id,
        status=status,
        preparation_screen=PreparationScreen(id=screen_id, name=name),
    )


class TestItemGroupKey:
    def test_key_uses_sentinels_for_missing_values(self, mapper, pizza):
        item = make_item(1, pizza)
        assert mapper.get_item_group_key(item) == "100|no-variant|PENDING|no-notes||"

    def test_key_sorts_modifiers_and_customizations(self, mapper, pizza):
        item = make_item(
            1,
            pizza,
            product_variant_id=5,
            preparation_notes="well done",
            product_modifiers=[ProductModifier(id=9, name="b"), ProductModifier(id=3, name="a")],
            selected_pizza_customizations=[
                SelectedPizzaCustomization(
                    pizza_customization_id=8, action=CustomizationAction.REMOVE, half=PizzaHalf.HALF_2
                ),
                SelectedPizzaCustomization(
                    pizza_customization_id=4, action=CustomizationAction.ADD, half=PizzaHalf.FULL
                ),
            ],
        )

        assert mapper.get_item_group_key(item) == (
            "100|5|PENDING|well done|3,9|4-ADD-FULL,8-REMOVE-HALF_2"
        )

    def test_modifier_order_does_not_change_key(self, mapper, pizza):
        first = make_item(1, pizza, product_modifiers=[ProductModifier(id=1), ProductModifier(id=2)])
        second = make_item(2, pizza, product_modifiers=[ProductModifier(id=2), ProductModifier(id=1)])
        assert mapper.get_item_group_key(first) == mapper.get_item_group_key(second)


class TestGrouping:
    def test_identical_items_collapse(self, mapper, pizza):
        order = make_order([make_item(1, pizza), make_item(2, pizza)])

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert len(ticket.items) == 1
        assert ticket.items[0].id == "1,2"
        assert ticket.items[0].quantity == 2

    def test_different_notes_split_lines(self, mapper, pizza):
        order = make_order(
            [make_item(1, pizza), make_item(2, pizza, preparation_notes="no basil")]
        )

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert [(line.id, line.quantity) for line in ticket.items] == [("1", 1), ("2", 1)]
        assert ticket.items[1].preparation_notes == "no basil"

    def test_different_status_split_lines(self, mapper, pizza):
        order = make_order(
            [make_item(1, pizza), make_item(2, pizza, preparation_status=PreparationStatus.READY)]
        )
        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})
        assert len(ticket.items) == 2

    def test_ungroup_keeps_one_line_per_item(self, mapper, pizza):
        order = make_order([make_item(1, pizza), make_item(2, pizza)])

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(ungroup_products=True), {})

        assert [(line.id, line.quantity) for line in ticket.items] == [("1", 1), ("2", 1)]


class TestItemLines:
    def test_line_fields(self, mapper, pizza):
        prepared_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        item = make_item(
            1,
            pizza,
            product_variant=ProductVariant(id=5, name="Large"),
            product_variant_id=5,
            product_modifiers=[ProductModifier(id=3, name="Extra cheese")],
            selected_pizza_customizations=[
                SelectedPizzaCustomization(
                    pizza_customization_id=4,
                    pizza_customization=PizzaCustomization(id=4, name="Olives"),
                    action=CustomizationAction.ADD,
                    half=PizzaHalf.HALF_1,
                )
            ],
            preparation_status=PreparationStatus.READY,
            prepared_at=prepared_at,
            prepared_by=User(first_name="Ana", last_name=None),
        )

        line = mapper.to_ticket(make_order([item]), PIZZA, KitchenOrderFilter(), {}).items[0]

        assert line.product_name == "Margherita"
        assert line.variant_name == "Large"
        assert line.modifiers == ["Extra cheese"]
        assert len(line.pizza_customizations) == 1
        assert line.pizza_customizations[0].customization_name == "Olives"
        assert line.pizza_customizations[0].action == CustomizationAction.ADD
        assert line.pizza_customizations[0].half == PizzaHalf.HALF_1
        assert line.prepared_at == prepared_at
        assert line.prepared_by_user.first_name == "Ana"
        assert line.prepared_by_user.last_name == ""

    def test_empty_customizations_are_omitted(self, mapper, pizza):
        line = mapper.to_ticket(make_order([make_item(1, pizza)]), PIZZA, KitchenOrderFilter(), {}).items[0]

        assert line.pizza_customizations is None
        assert line.prepared_by_user is None
        assert line.variant_name is None
        assert line.modifiers == []

    def test_items_without_product_are_skipped(self, mapper, pizza):
        order = make_order([make_item(1, None), make_item(2, pizza)])

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert [line.id for line in ticket.items] == ["2"]


class TestScreenOwnership:
    def test_other_screen_lines_dropped_by_default(self, mapper, pizza, beer):
        order = make_order([make_item(1, pizza), make_item(2, beer)])

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert [line.product_name for line in ticket.items] == ["Margherita"]

    def test_show_all_products_flags_foreign_lines(self, mapper, pizza, beer):
        order = make_order([make_item(1, pizza), make_item(2, beer)])

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(show_all_products=True), {})

        assert [(line.product_name, line.belongs_to_my_screen) for line in ticket.items] == [
            ("Margherita", True),
            ("Beer", False),
        ]

    def test_viewer_without_screen_owns_every_line(self, mapper, pizza, beer):
        order = make_order([make_item(1, pizza), make_item(2, beer)])

        ticket = mapper.to_ticket(order, None, KitchenOrderFilter(), {})

        assert len(ticket.items) == 2
        assert all(line.belongs_to_my_screen for line in ticket.items)

    def test_pending_items_only_count_own_screen(self, mapper, pizza, beer):
        order = make_order(
            [
                make_item(1, pizza, preparation_status=PreparationStatus.READY),
                make_item(2, beer, preparation_status=PreparationStatus.PENDING),
            ]
        )

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(show_all_products=True), {})
        assert ticket.has_pending_items is False

        ticket = mapper.to_ticket(order, BAR, KitchenOrderFilter(show_all_products=True), {})
        assert ticket.has_pending_items is True


class TestScreenStatusSummary:
    def test_my_screen_status_defaults_to_pending(self, mapper, pizza):
        ticket = mapper.to_ticket(make_order([make_item(1, pizza)]), PIZZA, KitchenOrderFilter(), {})

        assert ticket.my_screen_status == PreparationScreenStatus.PENDING
        assert ticket.screen_statuses == []

    def test_summary_lists_loaded_screens(self, mapper, pizza):
        statuses = {
            PIZZA: screen_record(PIZZA, PreparationScreenStatus.READY, "Pizza"),
            BAR: OrderPreparationScreenStatus(
                preparation_screen_id=BAR, status=PreparationScreenStatus.PENDING
            ),
        }

        ticket = mapper.to_ticket(make_order([make_item(1, pizza)]), PIZZA, KitchenOrderFilter(), statuses)

        assert ticket.my_screen_status == PreparationScreenStatus.READY
        assert [(s.screen_id, s.screen_name, s.status) for s in ticket.screen_statuses] == [
            (PIZZA, "Pizza", PreparationScreenStatus.READY)
        ]


class TestOrderDetails:
    def test_basic_fields(self, mapper, pizza):
        order = make_order([make_item(1, pizza)], notes="VIP table")

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert ticket.id == 1
        assert ticket.shift_order_number == 7
        assert ticket.order_status == OrderStatus.PENDING
        assert ticket.order_notes == "VIP table"
        assert ticket.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_dine_in(self, mapper, pizza):
        table = RestaurantTable(name="T4", area=Area(name="Terrace"))
        ticket = mapper.to_ticket(make_order([make_item(1, pizza)], table=table), PIZZA, KitchenOrderFilter(), {})

        assert ticket.order_details == DineInDetails(area_name="Terrace", table_name="T4")

    def test_take_away_name_falls_back(self, mapper, pizza):
        order = make_order(
            [make_item(1, pizza)],
            order_type=OrderType.TAKE_AWAY,
            customer=Customer(first_name=None, last_name=None, whatsapp_phone_number="555"),
        )

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert ticket.order_details == TakeAwayDetails(customer_name="Cliente", customer_phone="555")

    def test_take_away_full_name(self, mapper, pizza):
        order = make_order(
            [make_item(1, pizza)],
            order_type=OrderType.TAKE_AWAY,
            customer=Customer(first_name="Luis", last_name="Pérez"),
        )

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert ticket.order_details.customer_name == "Luis Pérez"

    def test_delivery(self, mapper, pizza):
        order = make_order(
            [make_item(1, pizza)],
            order_type=OrderType.DELIVERY,
            delivery_info=DeliveryInfo(full_address="Main St 1", recipient_phone="999"),
        )

        ticket = mapper.to_ticket(order, PIZZA, KitchenOrderFilter(), {})

        assert ticket.order_details == DeliveryDetails(delivery_address="Main St 1", delivery_phone="999")
        assert ticket.model_dump(mode="json")["order_details"]["order_type"] == "DELIVERY"
