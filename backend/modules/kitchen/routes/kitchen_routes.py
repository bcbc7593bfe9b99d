# backend/modules/kitchen/routes/kitchen_routes.py

"""
API routes for kitchen preparation screens.
"""

from typing import List, Optional
import asyncio
import json
import logging

from fastapi import (
    APIRouter,
    Body,
    Depends,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from core.auth import User, has_any_role, require_roles, verify_token
from core.config import settings
from core.database import get_db
from modules.orders.enums.order_enums import OrderType
from ..schemas.kitchen_schemas import (
    KitchenOrderFilter,
    KitchenOrderView,
    MarkItemPreparedRequest,
    MyScreenResponse,
    PreparationScreenView,
)
from ..services.kitchen_service import KitchenService
from ..services.kitchen_websocket_manager import (
    ITEM_PREPARED,
    ITEM_UNPREPARED,
    PREPARATION_CANCELLED,
    PREPARATION_COMPLETED,
    PREPARATION_STARTED,
    KitchenWebSocketManager,
    kitchen_websocket_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/kitchen", tags=["Kitchen"])

kitchen_user = require_roles(settings.kitchen_roles)


def get_kitchen_notifier() -> KitchenWebSocketManager:
    return kitchen_websocket_manager


async def _publish(
    notifier: KitchenWebSocketManager,
    event: str,
    order_id: Optional[int],
    screen_id: Optional[int],
    data: Optional[dict] = None,
):
    # The change is already committed; a failed push must not fail the request
    try:
        await notifier.notify(event, order_id, screen_id, data)
    except Exception as e:
        logger.error(f"Kitchen notification {event} for order {order_id} failed: {e}")


# ========== Tickets ==========

@router.get("/orders", response_model=List[KitchenOrderView])
async def get_kitchen_orders(
    order_type: Optional[OrderType] = Query(None),
    show_prepared: bool = Query(False),
    show_all_products: bool = Query(False),
    ungroup_products: bool = Query(False),
    screen_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
):
    """Tickets for the caller's screen (or ``screen_id``), oldest first"""
    filters = KitchenOrderFilter(
        order_type=order_type,
        show_prepared=show_prepared,
        show_all_products=show_all_products,
        ungroup_products=ungroup_products,
        screen_id=screen_id,
    )
    return KitchenService(db).get_kitchen_orders(current_user.id, filters)


@router.get("/my-screen", response_model=MyScreenResponse)
async def get_my_screen(
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
):
    screen = KitchenService(db).get_user_default_screen(current_user.id)
    if screen is None:
        return MyScreenResponse(screen=None)
    return MyScreenResponse(screen=PreparationScreenView.model_validate(screen))


# ========== Item toggles ==========

async def _toggle_item(
    item_id: str,
    is_prepared: bool,
    db: Session,
    current_user: User,
    notifier: KitchenWebSocketManager,
) -> Response:
    items = KitchenService(db).mark_item_prepared(item_id, current_user.id, is_prepared)

    first = items[0]
    await _publish(
        notifier,
        ITEM_PREPARED if is_prepared else ITEM_UNPREPARED,
        first.order_id,
        first.product.preparation_screen_id if first.product else None,
        {"item_ids": [item.id for item in items]},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/order-items/{item_id}/prepare",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def mark_item_prepared(
    item_id: str,
    payload: Optional[MarkItemPreparedRequest] = Body(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
    notifier: KitchenWebSocketManager = Depends(get_kitchen_notifier),
):
    """Mark a ticket line (``item_id`` may be ``"1,2,3"``) as prepared"""
    is_prepared = payload.is_prepared if payload is not None else True
    return await _toggle_item(item_id, is_prepared, db, current_user, notifier)


@router.patch(
    "/order-items/{item_id}/unprepare",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def mark_item_unprepared(
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
    notifier: KitchenWebSocketManager = Depends(get_kitchen_notifier),
):
    return await _toggle_item(item_id, False, db, current_user, notifier)


# ========== Screen transitions ==========

@router.patch(
    "/orders/{order_id}/start-preparation",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def start_preparation(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
    notifier: KitchenWebSocketManager = Depends(get_kitchen_notifier),
):
    record = KitchenService(db).start_preparation_for_screen(order_id, current_user.id)
    await _publish(
        notifier, PREPARATION_STARTED, order_id, record.preparation_screen_id,
        {"status": record.status.value},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/orders/{order_id}/complete-preparation",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def complete_preparation(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
    notifier: KitchenWebSocketManager = Depends(get_kitchen_notifier),
):
    record = KitchenService(db).complete_preparation_for_screen(order_id, current_user.id)
    await _publish(
        notifier, PREPARATION_COMPLETED, order_id, record.preparation_screen_id,
        {"status": record.status.value},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/orders/{order_id}/cancel-preparation",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def cancel_preparation(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(kitchen_user),
    notifier: KitchenWebSocketManager = Depends(get_kitchen_notifier),
):
    record = KitchenService(db).cancel_preparation_for_screen(order_id, current_user.id)
    if record is not None:
        await _publish(
            notifier, PREPARATION_CANCELLED, order_id, record.preparation_screen_id,
            {"status": record.status.value},
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========== WebSocket ==========

@router.websocket("/ws/{screen_id}")
async def kitchen_screen_websocket(
    websocket: WebSocket,
    screen_id: int,
    token: Optional[str] = Query(None),
):
    """Push channel for one preparation screen; authenticate with ``?token=``"""
    token_data = verify_token(token) if token else None
    if token_data is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if not has_any_role(token_data.roles, settings.kitchen_roles):
        logger.warning(
            f"User {token_data.user_id} refused on kitchen screen {screen_id} WebSocket"
        )
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await kitchen_websocket_manager.connect(websocket, screen_id)
    try:
        while True:
            try:
                message = await asyncio.wait_for(websocket.receive_text(), timeout=30.0)
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
                continue

            try:
                data = json.loads(message)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "detail": "Invalid JSON"})
                continue

            if isinstance(data, dict) and data.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.info(f"Kitchen screen {screen_id} WebSocket closed by client")
    finally:
        kitchen_websocket_manager.disconnect(websocket, screen_id)
