from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.main import app
from core.auth import User as AuthUser, get_current_user
from core.database import Base, get_db
from modules.kitchen.routes.kitchen_routes import get_kitchen_notifier

from factories import (
    ProductFactory,
    PreparationScreenFactory,
    TestingSession,
    UserFactory,
    engine,
)


class RecordingNotifier:
    """Stands in for the WebSocket manager and remembers published events."""

    def __init__(self):
        self.events = []

    async def notify(self, event, order_id, screen_id, data=None):
        self.events.append(
            {"type": event, "order_id": order_id, "screen_id": screen_id, "data": data}
        )


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        TestingSession.remove()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def kitchen(db_session):
    """Two screens (pizza, bar), a cook on each, one product per screen plus one without a screen."""
    pizza_screen = PreparationScreenFactory(name="Pizza")
    bar_screen = PreparationScreenFactory(name="Bar")

    return SimpleNamespace(
        pizza_screen=pizza_screen,
        bar_screen=bar_screen,
        pizza_cook=UserFactory(preparation_screen=pizza_screen),
        bar_cook=UserFactory(preparation_screen=bar_screen),
        waiter=UserFactory(role="waiter", preparation_screen=None),
        pizza=ProductFactory(name="Margherita", preparation_screen=pizza_screen),
        beer=ProductFactory(name="Beer", preparation_screen=bar_screen),
        bread=ProductFactory(name="Bread", preparation_screen=None),
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(db_session, notifier):
    """Create a test client with database and notifier overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_kitchen_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authenticate following requests as the given user."""
    def _login(user, roles=("kitchen",)):
        auth_user = AuthUser(id=user.id, username=user.username, roles=list(roles))
        app.dependency_overrides[get_current_user] = lambda: auth_user
        return auth_user

    return _login
