# backend/modules/kitchen/schemas/kitchen_schemas.py

"""
Pydantic schemas for the kitchen preparation API.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from modules.orders.enums.order_enums import (
    CustomizationAction,
    OrderStatus,
    OrderType,
    PizzaHalf,
    PreparationScreenStatus,
    PreparationStatus,
)


class KitchenOrderFilter(BaseModel):
    """Query options for the kitchen ticket list"""

    order_type: Optional[OrderType] = None
    show_prepared: bool = False
    show_all_products: bool = False
    ungroup_products: bool = False
    screen_id: Optional[int] = None


class MarkItemPreparedRequest(BaseModel):
    is_prepared: bool = True


class PizzaCustomizationSummary(BaseModel):
    customization_name: str
    action: CustomizationAction
    half: PizzaHalf


class PreparedByUser(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class KitchenOrderItemView(BaseModel):
    """One ticket line; ``id`` joins the ids of every grouped item with commas"""

    id: str
    product_name: str
    variant_name: Optional[str] = None
    modifiers: List[str] = Field(default_factory=list)
    pizza_customizations: Optional[List[PizzaCustomizationSummary]] = None
    preparation_notes: Optional[str] = None
    preparation_status: PreparationStatus
    prepared_at: Optional[datetime] = None
    prepared_by_user: Optional[PreparedByUser] = None
    quantity: int = 1
    belongs_to_my_screen: bool = True


class ScreenStatusView(BaseModel):
    screen_id: int
    screen_name: str
    status: PreparationScreenStatus


class DineInDetails(BaseModel):
    order_type: Literal[OrderType.DINE_IN] = OrderType.DINE_IN
    area_name: Optional[str] = None
    table_name: Optional[str] = None


class TakeAwayDetails(BaseModel):
    order_type: Literal[OrderType.TAKE_AWAY] = OrderType.TAKE_AWAY
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None


class DeliveryDetails(BaseModel):
    order_type: Literal[OrderType.DELIVERY] = OrderType.DELIVERY
    delivery_address: Optional[str] = None
    delivery_phone: Optional[str] = None


OrderDetails = Annotated[
    Union[DineInDetails, TakeAwayDetails, DeliveryDetails],
    Field(discriminator="order_type"),
]


class KitchenOrderView(BaseModel):
    """Kitchen ticket for one order as seen from one preparation screen"""

    id: int
    shift_order_number: int
    order_type: OrderType
    order_status: OrderStatus
    created_at: Optional[datetime] = None
    order_notes: Optional[str] = None
    order_details: OrderDetails
    items: List[KitchenOrderItemView] = Field(default_factory=list)
    has_pending_items: bool = False
    screen_statuses: List[ScreenStatusView] = Field(default_factory=list)
    my_screen_status: PreparationScreenStatus = PreparationScreenStatus.PENDING


class PreparationScreenView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True


class MyScreenResponse(BaseModel):
    screen: Optional[PreparationScreenView] = None
