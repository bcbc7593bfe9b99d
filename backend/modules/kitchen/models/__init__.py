# backend/modules/kitchen/models/__init__.py

"""
Kitchen preparation models.
"""

from .kitchen_models import (
    PreparationScreen,
    OrderPreparationScreenStatus,
)

# Register the models the kitchen relationships point at
from modules.menu.models import menu_models  # noqa: F401
from modules.orders.models import order_models  # noqa: F401
from modules.users.models import user_models  # noqa: F401

__all__ = [
    "PreparationScreen",
    "OrderPreparationScreenStatus",
]
