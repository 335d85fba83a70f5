# server/database.py

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from pydantic import ValidationError

from core.errors import StoreError, StoreErrorReason
from core.state import with_store_lock
from models.user import StoreDocument, UserRecord


logger = logging.getLogger(__name__)


def init_db(path: Path):
    """
    Creates an empty user store at `path` unless one already exists.
    """
    path = Path(path)
    with with_store_lock(path):
        if path.exists():
            return
        os.makedirs(path.parent, exist_ok=True)
        _write_document(path, StoreDocument())
        logger.info("Created empty user store at %s", path)


def _write_document(path: Path, document: StoreDocument):
    data = json.dumps(document.model_dump(mode="json"), indent=2)
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
    except OSError as e:
        raise StoreError(StoreErrorReason.IO_FAILURE, f"Could not write user store: {e}") from e


# -------------------------------
# Record Store
# -------------------------------

class RecordStore:
    """
    Whole-file JSON store of user records.

    Every operation reads the complete document, changes it in memory and
    writes the complete document back. Each cycle runs under a lock shared by
    all stores on the same file; use `locked()` to make a longer
    check-then-write sequence atomic.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = with_store_lock(self.path)

    @contextmanager
    def locked(self):
        with self._lock:
            yield self

    def _load(self) -> StoreDocument:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StoreError(StoreErrorReason.CORRUPT_DATA, f"User store is not valid: {e}") from e
        except OSError as e:
            raise StoreError(StoreErrorReason.IO_FAILURE, f"Could not read user store: {e}") from e

        try:
            document = StoreDocument.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            raise StoreError(StoreErrorReason.CORRUPT_DATA, f"User store is not valid: {e}") from e

        highest = max((user.id for user in document.users), default=0)
        if document.next_id <= highest:
            document.next_id = highest + 1
        return document

    def _save(self, document: StoreDocument):
        _write_document(self.path, document)

    def load_all(self) -> list[UserRecord]:
        with self._lock:
            return self._load().users

    def save_all(self, records: list[UserRecord]):
        with self._lock:
            try:
                document = self._load()
            except StoreError as e:
                # counter restarts past the highest saved id
                logger.warning("Replacing unreadable user store %s: %s", self.path, e.reason.value)
                document = StoreDocument()
            document.users = list(records)
            highest = max((user.id for user in document.users), default=0)
            document.next_id = max(document.next_id, highest + 1)
            self._save(document)

    def find_by_id(self, user_id: int) -> UserRecord | None:
        return next((u for u in self.load_all() if u.id == user_id), None)

    def find_by_username(self, username: str) -> UserRecord | None:
        return next((u for u in self.load_all() if u.username == username), None)

    def insert(self, username: str, hashed_password: str, email: str) -> UserRecord:
        with self._lock:
            document = self._load()
            record = UserRecord(
                id=document.next_id,
                username=username,
                hashed_password=hashed_password,
                email=email,
            )
            document.users.append(record)
            document.next_id += 1
            self._save(document)
            return record

    def update_by_id(self, user_id: int, patch: dict) -> UserRecord | None:
        with self._lock:
            document = self._load()
            for index, user in enumerate(document.users):
                if user.id == user_id:
                    merged = {**user.model_dump(), **patch, "id": user.id}
                    document.users[index] = UserRecord.model_validate(merged)
                    self._save(document)
                    return document.users[index]
            return None

    def delete_by_id(self, user_id: int) -> bool:
        with self._lock:
            document = self._load()
            remaining = [u for u in document.users if u.id != user_id]
            if len(remaining) == len(document.users):
                return False
            document.users = remaining
            self._save(document)
            return True
