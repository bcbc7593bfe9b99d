# backend/modules/kitchen/exceptions.py

"""
Failure kinds raised by kitchen preparation operations.

Each error maps to one precondition; all of them abort the operation
before anything is written.
"""

from core.exceptions import (
    NotFoundError,
    ValidationError,
    PermissionError,
    ConflictError,
)


class OrderItemsNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Order items not found"):
        super().__init__(detail=detail, error_code="ORDER_ITEMS_NOT_FOUND")


class InvalidItemGroupingError(ValidationError):
    def __init__(self, detail: str = "Items belong to different orders"):
        super().__init__(detail=detail, error_code="INVALID_ITEM_GROUPING")


class MissingScreenAssignmentError(ValidationError):
    def __init__(self, detail: str = "Product has no preparation screen assigned"):
        super().__init__(detail=detail, error_code="MISSING_SCREEN_ASSIGNMENT")


class ScreenAccessDeniedError(PermissionError):
    def __init__(self, detail: str = "You do not have access to this preparation screen"):
        super().__init__(detail=detail, error_code="SCREEN_ACCESS_DENIED")


class InvalidScreenStateError(ConflictError):
    def __init__(
        self,
        detail: str = "Items can only be changed while the screen is in preparation",
    ):
        super().__init__(detail=detail, error_code="INVALID_SCREEN_STATE")


class InvalidItemStateError(ConflictError):
    def __init__(self, detail: str):
        super().__init__(detail=detail, error_code="INVALID_ITEM_STATE")


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__(detail=f"Order {order_id} not found", error_code="ORDER_NOT_FOUND")
