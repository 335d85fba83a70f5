from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from config import Settings
from core.accounts import AccountService
from core.security import CredentialHasher, TokenService
from database import RecordStore, init_db
from main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def store_path(tmp_path):
    path = tmp_path / "data" / "users.json"
    init_db(path)
    return path


@pytest.fixture
def store(store_path):
    return RecordStore(store_path)


@pytest.fixture
def hasher():
    # minimum bcrypt cost keeps the suite fast
    return CredentialHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET, expires_delta=timedelta(hours=1))


@pytest.fixture
def accounts(store, hasher, tokens):
    return AccountService(store, hasher, tokens)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        store_path=tmp_path / "api" / "users.json",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
