# server/models/user.py

from datetime import datetime
from pydantic import BaseModel, Field, field_validator


# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


# -------------------------------
# Persisted Records
# -------------------------------

class UserRecord(BaseModel):
    """
    A stored user account.
    Holds the bcrypt hash, so it must never be returned to a client as-is.
    """
    id: int
    username: str
    hashed_password: str
    email: str

    def to_public(self) -> "UserPublic":
        return UserPublic(id=self.id, username=self.username, email=self.email)


class UserPublic(BaseModel):
    id: int
    username: str
    email: str


class StoreDocument(BaseModel):
    """
    Layout of the whole-file user store.
    next_id only ever grows, so ids are not reused after deletions.
    """
    next_id: int = 1
    users: list[UserRecord] = Field(default_factory=list)


# -------------------------------
# Request Bodies
# -------------------------------

class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: str

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=1)
    email: str | None = None


# -------------------------------
# Tokens
# -------------------------------

class Token(BaseModel):
    token: str
    token_type: str = "bearer"


class TokenClaims(BaseModel):
    id: int
    username: str
    issued_at: datetime
    expires_at: datetime
