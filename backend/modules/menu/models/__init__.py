from .menu_models import (
    Product,
    ProductVariant,
    ProductModifier,
    PizzaCustomization,
)

__all__ = [
    "Product",
    "ProductVariant",
    "ProductModifier",
    "PizzaCustomization",
]
