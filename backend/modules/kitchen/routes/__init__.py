from .kitchen_routes import router

__all__ = ["router"]
