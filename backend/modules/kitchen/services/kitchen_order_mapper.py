# backend/modules/kitchen/services/kitchen_order_mapper.py

"""
Turns loaded orders into kitchen ticket views.
"""

from typing import Dict, List, Optional

from modules.orders.enums.order_enums import (
    OrderType,
    PreparationScreenStatus,
    PreparationStatus,
)
from modules.orders.models.order_models import Customer, Order, OrderItem
from ..models.kitchen_models import OrderPreparationScreenStatus
from ..schemas.kitchen_schemas import (
    DeliveryDetails,
    DineInDetails,
    KitchenOrderFilter,
    KitchenOrderItemView,
    KitchenOrderView,
    PizzaCustomizationSummary,
    PreparedByUser,
    ScreenStatusView,
    TakeAwayDetails,
)

DEFAULT_RECEIPT_NAME = "Cliente"


class KitchenOrderMapper:
    """Builds the ticket a given preparation screen sees for an order"""

    def to_ticket(
        self,
        order: Order,
        user_screen_id: Optional[int],
        filters: KitchenOrderFilter,
        screen_statuses: Dict[int, OrderPreparationScreenStatus],
    ) -> KitchenOrderView:
        items = self._map_items(order, user_screen_id, filters.ungroup_products)
        if not filters.show_all_products:
            items = [item for item in items if item.belongs_to_my_screen]

        has_pending_items = any(
            item.belongs_to_my_screen
            and item.preparation_status != PreparationStatus.READY
            for item in items
        )

        my_record = (
            screen_statuses.get(user_screen_id) if user_screen_id is not None else None
        )
        my_screen_status = (
            my_record.status if my_record is not None else PreparationScreenStatus.PENDING
        )

        return KitchenOrderView(
            id=order.id,
            shift_order_number=order.shift_order_number,
            order_type=order.order_type,
            order_status=order.order_status,
            created_at=order.created_at,
            order_notes=order.notes or None,
            order_details=self._map_order_details(order),
            items=items,
            has_pending_items=has_pending_items,
            screen_statuses=self._map_screen_statuses(screen_statuses),
            my_screen_status=my_screen_status,
        )

    def _map_order_details(self, order: Order):
        if order.order_type == OrderType.DELIVERY:
            info = order.delivery_info
            return DeliveryDetails(
                delivery_address=info.full_address if info else None,
                delivery_phone=info.recipient_phone if info else None,
            )

        if order.order_type == OrderType.TAKE_AWAY:
            customer = order.customer
            return TakeAwayDetails(
                customer_name=self._customer_display_name(customer) if customer else None,
                customer_phone=customer.whatsapp_phone_number if customer else None,
            )

        table = order.table
        return DineInDetails(
            area_name=table.area.name if table and table.area else None,
            table_name=table.name if table else None,
        )

    @staticmethod
    def _customer_display_name(customer: Customer) -> str:
        full_name = f"{customer.first_name or ''} {customer.last_name or ''}".strip()
        return full_name or DEFAULT_RECEIPT_NAME

    def _map_items(
        self, order: Order, user_screen_id: Optional[int], ungroup: bool
    ) -> List[KitchenOrderItemView]:
        views = []
        for group in self.group_order_items(order.order_items or [], ungroup):
            view = self._map_item_group(group, user_screen_id)
            if view is not None:
                views.append(view)
        return views

    def _map_item_group(
        self, group: List[OrderItem], user_screen_id: Optional[int]
    ) -> Optional[KitchenOrderItemView]:
        item = group[0]
        if item.product is None:
            return None

        if user_screen_id is None:
            belongs_to_my_screen = True
        else:
            belongs_to_my_screen = item.product.preparation_screen_id == user_screen_id

        prepared_by_user = None
        if item.prepared_by is not None:
            prepared_by_user = PreparedByUser(
                first_name=item.prepared_by.first_name or "",
                last_name=item.prepared_by.last_name or "",
            )

        return KitchenOrderItemView(
            id=",".join(str(grouped.id) for grouped in group),
            product_name=item.product.name,
            variant_name=item.product_variant.name if item.product_variant else None,
            modifiers=[modifier.name for modifier in item.product_modifiers or []],
            pizza_customizations=self._map_pizza_customizations(item),
            preparation_notes=item.preparation_notes or None,
            preparation_status=item.preparation_status,
            prepared_at=item.prepared_at,
            prepared_by_user=prepared_by_user,
            quantity=len(group),
            belongs_to_my_screen=belongs_to_my_screen,
        )

    @staticmethod
    def _map_pizza_customizations(
        item: OrderItem,
    ) -> Optional[List[PizzaCustomizationSummary]]:
        if not item.selected_pizza_customizations:
            return None

        return [
            PizzaCustomizationSummary(
                customization_name=selected.pizza_customization.name,
                action=selected.action,
                half=selected.half,
            )
            for selected in item.selected_pizza_customizations
        ]

    @staticmethod
    def _map_screen_statuses(
        screen_statuses: Dict[int, OrderPreparationScreenStatus],
    ) -> List[ScreenStatusView]:
        return [
            ScreenStatusView(
                screen_id=record.preparation_screen_id,
                screen_name=record.preparation_screen.name,
                status=record.status,
            )
            for record in screen_statuses.values()
            if record.preparation_screen is not None
        ]

    def group_order_items(
        self, items: List[OrderItem], ungroup: bool = False
    ) -> List[List[OrderItem]]:
        """Collapse identical items into groups, keeping first-seen order"""
        if ungroup:
            return [[item] for item in items]

        groups: Dict[str, List[OrderItem]] = {}
        for item in items:
            groups.setdefault(self.get_item_group_key(item), []).append(item)
        return list(groups.values())

    @staticmethod
    def get_item_group_key(item: OrderItem) -> str:
        """
        Canonical identity of an item for grouping.

        ``product|variant|status|notes|modifier ids|customizations``, with
        ``no-variant`` and ``no-notes`` standing in for missing values and
        the two id lists sorted before joining.
        """
        modifier_ids = sorted(modifier.id for modifier in item.product_modifiers or [])
        customizations = sorted(
            f"{selected.pizza_customization_id}-{_enum_value(selected.action)}-"
            f"{_enum_value(selected.half)}"
            for selected in item.selected_pizza_customizations or []
        )

        parts = [
            str(item.product_id),
            str(item.product_variant_id) if item.product_variant_id else "no-variant",
            _enum_value(item.preparation_status),
            item.preparation_notes or "no-notes",
            ",".join(str(modifier_id) for modifier_id in modifier_ids),
            ",".join(customizations),
        ]
        return "|".join(parts)


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else str(value)
