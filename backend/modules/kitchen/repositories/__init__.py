from .screen_status_repository import (
    ScreenStatusRepository,
    SQLAlchemyScreenStatusRepository,
)

__all__ = [
    "ScreenStatusRepository",
    "SQLAlchemyScreenStatusRepository",
]
