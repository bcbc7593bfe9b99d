# backend/modules/kitchen/services/screen_status_processor.py

"""
In-memory aggregation over loaded preparation screen status rows.

Nothing here touches the database; every function works on orders that
were already loaded with their items and screen status records.
"""

from typing import Dict, Iterable, List, Optional, Set

from modules.orders.enums.order_enums import PreparationScreenStatus
from modules.orders.models.order_models import Order

# order_id -> screen_id -> status
ScreenStatusMap = Dict[int, Dict[int, PreparationScreenStatus]]


def process_screen_statuses_from_orders(orders: Iterable[Order]) -> ScreenStatusMap:
    status_map: ScreenStatusMap = {}
    for order in orders:
        order_statuses = status_map.setdefault(order.id, {})
        for record in order.preparation_screen_statuses or []:
            order_statuses[record.preparation_screen_id] = record.status
    return status_map


def get_screen_status_for_order(
    order_id: int, screen_id: int, status_map: ScreenStatusMap
) -> Optional[PreparationScreenStatus]:
    return status_map.get(order_id, {}).get(screen_id)


def filter_orders_by_screen_status(
    orders: List[Order],
    status_map: ScreenStatusMap,
    user_screen_id: Optional[int],
    show_prepared: bool,
) -> List[Order]:
    """
    Keep the orders the viewer should see.

    With ``show_prepared`` only orders whose viewer-screen status is READY
    remain; otherwise only the ones that are not READY yet (including
    orders with no record for the screen). A viewer without a screen sees
    every order.
    """
    if user_screen_id is None:
        return list(orders)

    visible = []
    for order in orders:
        status = get_screen_status_for_order(order.id, user_screen_id, status_map)
        is_ready = status == PreparationScreenStatus.READY
        if is_ready == show_prepared:
            visible.append(order)
    return visible


def get_unique_screen_ids(order: Order) -> Set[int]:
    screen_ids = set()
    for item in order.order_items or []:
        if item.product is not None and item.product.preparation_screen_id is not None:
            screen_ids.add(item.product.preparation_screen_id)
    return screen_ids


def are_all_screens_ready(
    screen_ids: Iterable[int], order_status_map: Dict[int, PreparationScreenStatus]
) -> bool:
    # A screen with no record has not finished
    return all(
        order_status_map.get(screen_id) == PreparationScreenStatus.READY
        for screen_id in screen_ids
    )


def is_any_screen_in_preparation(
    screen_ids: Iterable[int], order_status_map: Dict[int, PreparationScreenStatus]
) -> bool:
    return any(
        order_status_map.get(screen_id) == PreparationScreenStatus.IN_PREPARATION
        for screen_id in screen_ids
    )
