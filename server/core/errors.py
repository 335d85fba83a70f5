# server/core/errors.py

from dataclasses import dataclass
from enum import Enum


# -------------------------------
# Account Errors
# -------------------------------

class AccountErrorReason(str, Enum):
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND = "not_found"


class AccountError(Exception):
    """
    Raised by AccountService for expected business outcomes.
    The API layer maps each reason onto an HTTP status.
    """

    def __init__(self, reason: AccountErrorReason, message: str | None = None):
        super().__init__(message or reason.value)
        self.reason = reason
        self.message = message or reason.value


# -------------------------------
# Token Errors
# -------------------------------

class TokenErrorReason(str, Enum):
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenError:
    """
    Result value returned (not raised) by TokenService.validate.
    """
    reason: TokenErrorReason
    detail: str = ""


# -------------------------------
# Store Errors
# -------------------------------

class StoreErrorReason(str, Enum):
    IO_FAILURE = "io_failure"
    CORRUPT_DATA = "corrupt_data"


class StoreError(Exception):
    """
    Raised by RecordStore when the backing file cannot be read, written or parsed.
    """

    def __init__(self, reason: StoreErrorReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message
