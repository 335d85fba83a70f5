# server/core/state.py

from threading import Lock, RLock
from collections import defaultdict
from pathlib import Path


_registry_lock = Lock()
_store_locks = defaultdict(RLock)


def with_store_lock(path: Path):
    # Keyed by resolved path so every RecordStore on the same file shares one lock
    key = Path(path).resolve()
    with _registry_lock:
        return _store_locks[key]
