# server/core/accounts.py

import logging

from core.errors import AccountError, AccountErrorReason
from core.security import CredentialHasher, TokenService
from database import RecordStore
from models.user import TokenClaims, UserPublic, UserRecord


logger = logging.getLogger(__name__)


class AccountService:
    """
    Registration, login and user CRUD on top of a RecordStore.

    StoreError is not caught here; it propagates to the API layer,
    which answers it with an opaque server error.
    """

    def __init__(self, store: RecordStore, hasher: CredentialHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    # -------------------------------
    # Authentication
    # -------------------------------

    def register(self, username: str, password: str, email: str) -> UserRecord:
        if self.store.find_by_username(username):
            raise AccountError(AccountErrorReason.ALREADY_EXISTS, "User already exists")

        hashed = self.hasher.hash(password)

        # re-check under the lock, another request may have taken the name while hashing
        with self.store.locked():
            if self.store.find_by_username(username):
                raise AccountError(AccountErrorReason.ALREADY_EXISTS, "User already exists")
            user = self.store.insert(username, hashed, email)

        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    def login(self, username: str, password: str) -> str:
        user = self.store.find_by_username(username)
        if user is None:
            self.hasher.dummy_verify()
            logger.debug("Login failed: unknown username %r", username)
            raise AccountError(AccountErrorReason.INVALID_CREDENTIALS, "Invalid credentials")

        if not self.hasher.verify(password, user.hashed_password):
            logger.debug("Login failed: wrong password for user id=%s", user.id)
            raise AccountError(AccountErrorReason.INVALID_CREDENTIALS, "Invalid credentials")

        logger.info("User id=%s logged in", user.id)
        return self.tokens.issue({"id": user.id, "username": user.username})

    def current_user(self, claims: TokenClaims) -> UserPublic:
        return self.get_user(claims.id)

    # -------------------------------
    # User CRUD
    # -------------------------------

    def list_users(self) -> list[UserPublic]:
        return [user.to_public() for user in self.store.load_all()]

    def get_user(self, user_id: int) -> UserPublic:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise AccountError(AccountErrorReason.NOT_FOUND, "User not found")
        return user.to_public()

    def update_user(self, user_id: int, username: str | None = None, email: str | None = None) -> UserPublic:
        patch = {}
        if username is not None:
            patch["username"] = username
        if email is not None:
            patch["email"] = email

        with self.store.locked():
            if self.store.find_by_id(user_id) is None:
                raise AccountError(AccountErrorReason.NOT_FOUND, "User not found")

            # usernames stay unique across updates, not only at registration
            if username is not None:
                owner = self.store.find_by_username(username)
                if owner is not None and owner.id != user_id:
                    raise AccountError(AccountErrorReason.ALREADY_EXISTS, "Username already taken")

            updated = self.store.update_by_id(user_id, patch)

        logger.info("Updated user id=%s fields=%s", user_id, sorted(patch))
        return updated.to_public()

    def delete_user(self, user_id: int) -> None:
        if not self.store.delete_by_id(user_id):
            raise AccountError(AccountErrorReason.NOT_FOUND, "User not found")
        logger.info("Deleted user id=%s", user_id)
