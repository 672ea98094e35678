"""
Pytest configuration and fixtures for Finance Categories tests

Provides:
1. In-memory SQLite database per test
2. Mock Redis client for the category list cache
3. Test users and category payloads
4. FastAPI test client with dependency overrides
"""

import json
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from finance_categories.core.redis_client import (
    category_generation_key,
    category_list_key,
    get_redis,
)
from finance_categories.crud import user as crud_user
from finance_categories.db.session import enable_sqlite_foreign_keys, get_db
from finance_categories.main import app
from finance_categories.models import Base
from finance_categories.services.category_actions import CategoryActions


# === PYTEST CONFIGURATION ===

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast)"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (slow)"
    )


# === DATABASE ===

@pytest.fixture
def engine():
    """Fresh in-memory database with foreign keys enforced"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session bound to the test database"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# === MOCK REDIS CLIENT ===

class MockRedisClient:
    """Mock Redis client for testing"""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.invalidated: List[str] = []
        self.connected = False

    async def connect(self):
        self.connected = True

    async def disconnect(self):
        self.connected = False

    async def health_check(self):
        return self.connected

    # General caching methods
    async def set_cache(self, key: str, value: Any, ttl: int = 3600):
        self.data[key] = value if isinstance(value, str) else json.dumps(value)

    async def get_cache(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def delete_cache(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    # Category list methods
    async def get_category_generation(self, user_id: str) -> int:
        return int(self.data.get(category_generation_key(user_id), 0))

    async def get_category_list(self, user_id: str, generation: int):
        data = await self.get_cache(category_list_key(user_id, generation))
        return json.loads(data) if data is not None else None

    async def set_category_list(self, user_id: str, generation: int, categories):
        await self.set_cache(category_list_key(user_id, generation), categories)

    async def invalidate_category_list(self, user_id: str) -> int:
        self.invalidated.append(user_id)
        generation = await self.get_category_generation(user_id) + 1
        self.data[category_generation_key(user_id)] = str(generation)
        await self.delete_cache(category_list_key(user_id, generation - 1))
        return generation


@pytest.fixture
def mock_redis():
    """Mock Redis client for testing"""
    return MockRedisClient()


# === USERS AND PAYLOADS ===

@pytest.fixture
def user(db):
    return crud_user.create(db, user_id="user-1", email="user1@example.com", name="User One")


@pytest.fixture
def other_user(db):
    return crud_user.create(db, user_id="user-2", email="user2@example.com", name="User Two")


@pytest.fixture
def groceries_payload():
    return {
        "name": "Groceries",
        "type": "EXPENSE",
        "bgColor": "#F9FAFB",
        "fgColor": "#4B5563",
        "icon": "shopping-cart",
    }


@pytest.fixture
def salary_payload():
    return {
        "name": "Salary",
        "type": "INCOME",
        "bgColor": "#E8F5E9",
        "fgColor": "#2E7D32",
        "icon": "dollar-sign",
    }


# === ACTION LAYER ===

@pytest.fixture
def actions(db, user, mock_redis):
    """Category actions for the first test user"""
    return CategoryActions(db=db, user_id=user.id, cache=mock_redis)


@pytest.fixture
def other_actions(db, other_user, mock_redis):
    """Category actions for the second test user"""
    return CategoryActions(db=db, user_id=other_user.id, cache=mock_redis)


# === FASTAPI TEST CLIENT ===

@pytest.fixture
def override_dependencies(db, mock_redis):
    """Route database and Redis dependencies to the test doubles"""

    def get_test_db():
        yield db

    async def get_mock_redis():
        return mock_redis

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_redis] = get_mock_redis
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(override_dependencies):
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def auth_headers(user):
    return {"X-User-Id": user.id}


@pytest.fixture
def other_auth_headers(other_user):
    return {"X-User-Id": other_user.id}
