"""
Rebuild the recommendation cache from the current skill/interest data.

Usage:
  python -m teamup.scripts.generate_recommendations

Exits non-zero when the database cannot be read or the cache cannot be
written. Meant for cron; the API also rebuilds on demand when stale.
"""

import logging
import sys

from teamup.database import SessionLocal
from teamup.services.recommendation_service import get_recommendation_service

logger = logging.getLogger(__name__)


def generate() -> int:
    service = get_recommendation_service()
    db = SessionLocal()
    try:
        count = service.regenerate(db)
        print(f"Generated recommendations for {count} users.")
        print(f"Saved to {service.cache.path}")
        return 0
    except Exception as exc:
        logger.exception("Recommendation generation failed")
        print(f"Error generating recommendations: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(generate())
