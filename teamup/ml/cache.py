"""
Recommendation cache backends.

The cache maps user ID -> ranked candidate IDs. Freshness is judged from the
time of the last write: a cache is fresh while less than `ttl_seconds` have
passed since then.
"""

import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 10 * 60


class RecommendationCache(ABC):

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds

    @abstractmethod
    def load(self) -> Dict[int, List[int]]:
        """Whole mapping; empty when nothing has been written."""

    @abstractmethod
    def replace_all(self, mapping: Mapping[int, List[int]], timestamp: Optional[float] = None) -> None:
        ...

    @abstractmethod
    def last_modified(self) -> Optional[float]:
        """Epoch seconds of the last write, or None if never written."""

    def get(self, user_id: int) -> Optional[List[int]]:
        return self.load().get(user_id)

    def put(self, user_id: int, candidate_ids: List[int], timestamp: Optional[float] = None) -> None:
        mapping = self.load()
        mapping[user_id] = list(candidate_ids)
        self.replace_all(mapping, timestamp)

    def is_fresh(self, now: Optional[float] = None) -> bool:
        written = self.last_modified()
        if written is None:
            return False
        if now is None:
            now = time.time()
        return (now - written) < self.ttl_seconds


class InMemoryRecommendationCache(RecommendationCache):

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        super().__init__(ttl_seconds)
        self._mapping: Dict[int, List[int]] = {}
        self._written_at: Optional[float] = None

    def load(self) -> Dict[int, List[int]]:
        return {user_id: list(ids) for user_id, ids in self._mapping.items()}

    def replace_all(self, mapping, timestamp=None):
        self._mapping = {int(user_id): list(ids) for user_id, ids in mapping.items()}
        self._written_at = time.time() if timestamp is None else timestamp

    def last_modified(self):
        return self._written_at


class JsonFileRecommendationCache(RecommendationCache):
    """JSON object file keyed by user ID; the file mtime is the write time."""

    def __init__(self, path, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        super().__init__(ttl_seconds)
        self.path = Path(path)

    def load(self) -> Dict[int, List[int]]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable recommendation cache %s: %s", self.path, exc)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Ignoring recommendation cache %s: expected a JSON object", self.path)
            return {}

        mapping: Dict[int, List[int]] = {}
        for key, ids in raw.items():
            if not isinstance(ids, list):
                logger.warning("Skipping malformed cache entry for key %r", key)
                continue
            try:
                mapping[int(key)] = [int(candidate_id) for candidate_id in ids]
            except (TypeError, ValueError):
                logger.warning("Skipping malformed cache entry for key %r", key)
        return mapping

    def replace_all(self, mapping, timestamp=None):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {str(user_id): list(ids) for user_id, ids in mapping.items()}

        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            if timestamp is not None:
                os.utime(tmp_path, (timestamp, timestamp))
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def last_modified(self):
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None
