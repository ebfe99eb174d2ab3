import os

# Settings are read at import time, so they must exist before any app module loads
os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "marketzone_test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Dict, Iterator

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from dependencies.db import get_db
from fakes import FakeDatabase
from helpers.auth import create_access_token
from main import create_app
from realtime.connection_registry import ConnectionRegistry
from realtime.delivery_gateway import LiveDeliveryGateway
from repos.message_repo import MessageRepository
from repos.user_repo import UserRepository
from services.conversation_service import ConversationService
from services.message_service import MessageService


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def users(fake_db: FakeDatabase) -> Dict[str, str]:
    """Three registered users: alice, bob and carol"""
    ids = {}
    for name, second, avatar in (
        ("Alice", "Beridze", "https://cdn.example.com/a.png"),
        ("Bob", None, None),
        ("Carol", "Kapanadze", None),
    ):
        oid = ObjectId()
        document = {"_id": oid, "name": name, "email": f"{name.lower()}@example.com", "avatar": avatar}
        if second:
            document["secondName"] = second
        fake_db.users.documents.append(document)
        ids[name.lower()] = str(oid)
    return ids


@pytest.fixture()
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture()
def message_repo(fake_db: FakeDatabase) -> MessageRepository:
    return MessageRepository(fake_db, timeout=2)


@pytest.fixture()
def user_repo(fake_db: FakeDatabase) -> UserRepository:
    return UserRepository(fake_db, timeout=2)


@pytest.fixture()
def message_service(message_repo, user_repo, registry) -> MessageService:
    return MessageService(message_repo, user_repo, LiveDeliveryGateway(registry))


@pytest.fixture()
def conversation_service(message_repo, user_repo) -> ConversationService:
    return ConversationService(message_repo, user_repo)


@pytest.fixture()
def app(fake_db: FakeDatabase):
    application = create_app(connect_db=False)
    application.dependency_overrides[get_db] = lambda: fake_db
    return application


@pytest.fixture()
def client(app) -> Iterator[TestClient]:
    # Entering the client keeps one event loop for HTTP calls and WebSockets alike
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    """Builds the Authorization header for a user id"""
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers
