import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import setup_logging

# ========== Kitchen ==========
from modules.kitchen.routes.kitchen_routes import router as kitchen_router
from modules.kitchen.services.kitchen_websocket_manager import kitchen_websocket_manager

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Kitchen Preparation API",
    description="""
    Kitchen side of the restaurant POS backend.

    * **Kitchen tickets** - open orders per preparation screen, with grouped items
    * **Item preparation** - mark ticket lines prepared / unprepared
    * **Screen workflow** - start, complete and cancel preparation per screen
    * **Live updates** - WebSocket push to connected kitchen screens

    All endpoints require a bearer JWT with a kitchen role.
    """,
    version="1.0.0",
    debug=settings.debug,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(kitchen_router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Kitchen API starting ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown"""
    await kitchen_websocket_manager.close_all_connections()


@app.get("/health")
def health_check():
    return {"status": "ok"}
