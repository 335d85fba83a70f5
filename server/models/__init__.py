# server/models/__init__.py

from .user import (
    UserRecord,
    UserPublic,
    StoreDocument,
    RegisterRequest,
    LoginRequest,
    UserUpdate,
    Token,
    TokenClaims,
)
