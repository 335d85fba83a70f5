# server/config.py

import os
from pathlib import Path
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    jwt_secret_key: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    store_path: Path = Path("data/users.json")
    api_prefix: str = ""
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


_ENV_FIELDS = {
    "JWT_SECRET_KEY": "jwt_secret_key",
    "JWT_ALGORITHM": "jwt_algorithm",
    "ACCESS_TOKEN_EXPIRE_MINUTES": "access_token_expire_minutes",
    "BCRYPT_ROUNDS": "bcrypt_rounds",
    "USER_STORE_PATH": "store_path",
    "API_PREFIX": "api_prefix",
    "LOG_LEVEL": "log_level",
    "HOST": "host",
    "PORT": "port",
}


def get_settings() -> Settings:
    """
    Reads settings from the environment (and a local .env file, if any).
    Unset variables fall back to the model defaults; JWT_SECRET_KEY is required.
    """
    load_dotenv()
    values = {
        field: os.getenv(env_name)
        for env_name, field in _ENV_FIELDS.items()
        if os.getenv(env_name) is not None
    }
    return Settings(**values)
