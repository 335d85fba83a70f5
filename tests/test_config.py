from pathlib import Path

import pytest
from pydantic import ValidationError

from config import get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ["JWT_SECRET_KEY", "ACCESS_TOKEN_EXPIRE_MINUTES", "BCRYPT_ROUNDS", "USER_STORE_PATH", "API_PREFIX"]:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "s3cret")
    settings = get_settings()
    assert settings.jwt_secret_key == "s3cret"
    assert settings.access_token_expire_minutes == 60
    assert settings.bcrypt_rounds == 10
    assert settings.store_path == Path("data/users.json")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "s3cret")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("BCRYPT_ROUNDS", "12")
    monkeypatch.setenv("USER_STORE_PATH", "/tmp/accounts.json")
    settings = get_settings()
    assert settings.access_token_expire_minutes == 15
    assert settings.bcrypt_rounds == 12
    assert settings.store_path == Path("/tmp/accounts.json")


def test_secret_is_required():
    with pytest.raises(ValidationError):
        get_settings()


def test_bcrypt_rounds_bounds(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "s3cret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "3")
    with pytest.raises(ValidationError):
        get_settings()
