"""
공통 테스트 픽스처

실행 방법:
    pip install -e ".[dev]"
    pytest -v

DB는 asyncpg 커넥션을 AsyncMock으로 대체 (get_connection 의존성 override)
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from main import app
from utils.auth import create_user_token
from utils.database import get_connection


@pytest.fixture
def conn():
    """asyncpg 커넥션 대역 (기본: 결과 없음)"""
    conn = AsyncMock()
    conn.fetch.return_value = []
    conn.fetchrow.return_value = None
    conn.fetchval.return_value = None
    return conn


@pytest.fixture
def client(conn):
    """테스트용 FastAPI 클라이언트"""
    async def override_get_connection():
        yield conn

    app.dependency_overrides[get_connection] = override_get_connection
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_user_token("admin", is_admin=True)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_user_token("u1", is_admin=False)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def company_row():
    return {
        "handle": "c1",
        "name": "C1",
        "description": "Desc1",
        "num_employees": 1,
        "logo_url": "http://c1.img",
    }


@pytest.fixture
def job_row():
    return {
        "id": 1,
        "title": "Job1",
        "salary": 100,
        "equity": Decimal("0.1"),
        "company_handle": "c1",
    }


@pytest.fixture
def user_row():
    return {
        "username": "u1",
        "first_name": "U1F",
        "last_name": "U1L",
        "email": "user1@example.com",
        "is_admin": False,
    }
