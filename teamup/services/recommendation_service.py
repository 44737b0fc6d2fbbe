from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from teamup.config import settings
from teamup.crud import connection as connection_crud
from teamup.crud import profile as profile_crud
from teamup.crud import user as user_crud
from teamup.ml import recommender
from teamup.ml.cache import JsonFileRecommendationCache, RecommendationCache

logger = logging.getLogger(__name__)


class RecommendationService:
    """
    Serves ranked teammate candidates from a cache that is rebuilt on demand.

    Two requests hitting a stale cache at the same moment may both rebuild
    it. Rebuilds are idempotent, so the last writer wins with the same data.
    """

    def __init__(
        self,
        cache: RecommendationCache,
        *,
        top_k: int = recommender.DEFAULT_TOP_K,
        fallback_limit: int = recommender.DEFAULT_TOP_K,
        generator: Optional[Callable[[Session, int], Dict[int, List[int]]]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cache = cache
        self.top_k = top_k
        self.fallback_limit = fallback_limit
        self.generator = generator or recommender.generate_from_db
        self.clock = clock

    # ======================
    # CACHE MAINTENANCE
    # ======================

    def regenerate(self, db: Session) -> int:
        """Rebuild the whole cache; returns the number of users written."""
        mapping = self.generator(db, self.top_k)
        self.cache.replace_all(mapping, timestamp=self.clock())
        logger.info("Recommendation cache rebuilt for %d users", len(mapping))
        return len(mapping)

    def ensure_fresh(self, db: Session) -> bool:
        """
        Rebuild the cache if it is stale.

        Failures are logged and swallowed; the caller keeps whatever the
        cache already holds. Returns True when a rebuild succeeded.
        """
        if self.cache.is_fresh(self.clock()):
            return False
        try:
            self.regenerate(db)
            return True
        except Exception:
            # A failed statement leaves the transaction aborted; reset it so
            # the rest of the request can still query.
            db.rollback()
            logger.exception("Recommendation cache rebuild failed; serving existing data")
            return False

    def cached_candidates(self, user_id: int) -> List[int]:
        try:
            return self.cache.get(user_id) or []
        except Exception:
            logger.exception("Could not read recommendation cache for user %s", user_id)
            return []

    # ======================
    # SERVING
    # ======================

    def excluded_ids(self, db: Session, user_id: int) -> set:
        excluded = set(connection_crud.get_connection_pairs(db, user_id))
        excluded.add(user_id)
        return excluded

    def candidate_ids(self, db: Session, user_id: int) -> tuple[List[int], bool]:
        """
        Final ordered candidate IDs for `user_id`.

        Returns (ids, ranked). `ranked` is False when the list came from the
        fallback pool.
        """
        self.ensure_fresh(db)

        excluded = self.excluded_ids(db, user_id)
        ranked = [
            candidate_id
            for candidate_id in self.cached_candidates(user_id)
            if candidate_id not in excluded
        ][: self.top_k]
        if ranked:
            return ranked, True

        fallback = user_crud.find_unconnected_user_ids(db, excluded, self.fallback_limit)
        return fallback, False

    def recommend(self, db: Session, user_id: int) -> List[dict]:
        """
        Profile-enriched recommendations for one user.

        Datastore errors propagate; an empty list means there is nobody left
        to suggest.
        """
        ids, ranked = self.candidate_ids(db, user_id)
        if not ids:
            return []

        records = profile_crud.get_profile_batch(db, ids)
        if ranked:
            position = {candidate_id: index for index, candidate_id in enumerate(ids)}
            records.sort(key=lambda record: position[record["user_id"]])

        for record in records:
            record["is_recommended"] = ranked
        return records

    def status(self) -> dict:
        written = self.cache.last_modified()
        return {
            "fresh": self.cache.is_fresh(self.clock()),
            "last_generated": (
                datetime.fromtimestamp(written, tz=timezone.utc) if written is not None else None
            ),
            "users_cached": len(self.cache.load()),
            "ttl_minutes": int(self.cache.ttl_seconds // 60),
        }


@lru_cache(maxsize=1)
def get_recommendation_service() -> RecommendationService:
    cache = JsonFileRecommendationCache(
        settings.RECOMMENDATION_CACHE_PATH,
        ttl_seconds=settings.RECOMMENDATION_TTL_MINUTES * 60,
    )
    return RecommendationService(
        cache,
        top_k=settings.RECOMMENDATION_TOP_K,
        fallback_limit=settings.RECOMMENDATION_FALLBACK_LIMIT,
    )
