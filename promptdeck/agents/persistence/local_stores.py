"""
Local storage tiers.

Both stores expose the same narrow ``load()``/``save(records)`` interface and
hold plain Project-shaped dicts. Reads and writes are wholesale; concurrent
writers are last-writer-wins.
"""

import copy
import threading
from typing import Any, Dict, List, Optional

import diskcache

from promptdeck.agents import config as global_config
from promptdeck.agents.generation.config import get_persistence_config
from promptdeck.setup_logging_optimized import get_logger

logger = get_logger(__name__)

Record = Dict[str, Any]


class DurableLocalStore:
    """Device-local list of projects that survives restarts, kept in a diskcache."""

    def __init__(self, directory: Optional[str] = None, key: str = global_config.LOCAL_PROJECTS_KEY):
        self.directory = directory
        self.key = key
        self._cache: Optional[diskcache.Cache] = None
        self._init_lock = threading.Lock()

    @property
    def cache(self) -> diskcache.Cache:
        if self._cache is None:
            with self._init_lock:
                if self._cache is None:
                    if self.directory is None:
                        self.directory = get_persistence_config().local_store_dir
                    self._cache = diskcache.Cache(self.directory)
                    logger.debug(f"Opened durable local store at {self.directory}")
        return self._cache

    def load(self) -> List[Record]:
        records = self.cache.get(self.key)
        return list(records) if isinstance(records, list) else []

    def save(self, records: List[Record]) -> None:
        self.cache.set(self.key, list(records))

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()
            self._cache = None


class EphemeralStore:
    """Session-scoped store, one entry per pending deck. Lost when the process exits."""

    def __init__(self, key_prefix: str = global_config.TEMP_PROJECT_KEY_PREFIX):
        self.key_prefix = key_prefix
        self._entries: Dict[str, Record] = {}
        self._lock = threading.Lock()

    def _key(self, project_id: str) -> str:
        return f"{self.key_prefix}{project_id}"

    def get(self, project_id: str) -> Optional[Record]:
        with self._lock:
            record = self._entries.get(self._key(project_id))
        return copy.deepcopy(record) if record is not None else None

    def put(self, project_id: str, record: Record) -> None:
        with self._lock:
            self._entries[self._key(project_id)] = copy.deepcopy(record)

    def remove(self, project_id: str) -> bool:
        with self._lock:
            return self._entries.pop(self._key(project_id), None) is not None

    def load(self) -> List[Record]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._entries.values()]

    def save(self, records: List[Record]) -> None:
        with self._lock:
            self._entries = {self._key(record['id']): copy.deepcopy(record) for record in records}
