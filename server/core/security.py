# server/core/security.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
from pydantic import ValidationError

from core.errors import TokenError, TokenErrorReason
from models.user import MAX_PASSWORD_BYTES, TokenClaims


logger = logging.getLogger(__name__)


# -------------------------------
# Password Hashing
# -------------------------------

class CredentialHasher:
    """
    Salted bcrypt hashing. The salt lives inside the hash string,
    so callers only ever store and pass back that one value.
    """

    def __init__(self, rounds: int = 10):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        # nothing over the limit was ever hashed, and bcrypt would compare only a prefix
        if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # unidentifiable or truncated hash
            return False

    def dummy_verify(self) -> None:
        self.pwd_context.dummy_verify()


# -------------------------------
# Session Tokens
# -------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret_key: str,
        expires_delta: timedelta = timedelta(minutes=60),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._secret_key = secret_key
        self.expires_delta = expires_delta
        self.algorithm = algorithm
        self._clock = clock

    def __repr__(self) -> str:
        return f"TokenService(algorithm={self.algorithm!r}, expires_delta={self.expires_delta!r})"

    def issue(self, data: dict) -> str:
        issued_at = self._clock()
        to_encode = {
            "id": data["id"],
            "username": data["username"],
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> TokenClaims | TokenError:
        """
        Returns the token's claims, or a TokenError describing why it was rejected.
        Signature is checked before expiry, so a forged token never reports Expired.
        """
        try:
            jwt.get_unverified_claims(token)
        except (JWTError, AttributeError) as e:
            return TokenError(TokenErrorReason.MALFORMED, str(e))

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as e:
            return TokenError(TokenErrorReason.MALFORMED, str(e))
        except JWTError as e:
            return TokenError(TokenErrorReason.INVALID_SIGNATURE, str(e))

        try:
            claims = TokenClaims(
                id=payload["id"],
                username=payload["username"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, OverflowError, ValidationError) as e:
            return TokenError(TokenErrorReason.MALFORMED, f"Invalid claims: {e}")

        if self._clock() >= claims.expires_at:
            return TokenError(TokenErrorReason.EXPIRED, "Signature has expired.")
        return claims
