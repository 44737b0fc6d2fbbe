# teamup/ml/recommender.py
"""
Recommendation Generator

Ranks every user against every other user by complementary skills and
shared interests:

    score(U, C) = 2.0 * |skills(C) - skills(U)| + 1.5 * |interests(U) & interests(C)|

Candidates are sorted by score descending, ties by candidate id ascending,
and truncated to the top K (20 by default).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from sqlalchemy.orm import Session

from teamup.crud import profile as profile_crud
from teamup.crud import user as user_crud

logger = logging.getLogger(__name__)

# Score weights
WEIGHT_SKILL = 2.0
WEIGHT_INTEREST = 1.5

DEFAULT_TOP_K = 20

EMPTY: frozenset = frozenset()


@dataclass
class Snapshot:
    """Skill/interest relation read once at the start of a generation run."""
    user_ids: List[int]
    skills: Dict[int, Set[str]] = field(default_factory=dict)
    interests: Dict[int, Set[str]] = field(default_factory=dict)


def unique_skills(user_skills: Set[str], candidate_skills: Set[str]) -> int:
    """Number of skills the candidate has that the user does not."""
    return len(candidate_skills - user_skills)


def shared_interests(user_interests: Set[str], candidate_interests: Set[str]) -> int:
    return len(user_interests & candidate_interests)


def score_pair(
    user_skills: Set[str],
    user_interests: Set[str],
    candidate_skills: Set[str],
    candidate_interests: Set[str],
) -> float:
    return (
        WEIGHT_SKILL * unique_skills(user_skills, candidate_skills)
        + WEIGHT_INTEREST * shared_interests(user_interests, candidate_interests)
    )


def rank_candidates(
    user_id: int,
    user_ids: Iterable[int],
    skills: Mapping[int, Set[str]],
    interests: Mapping[int, Set[str]],
    top_k: int = DEFAULT_TOP_K,
) -> List[Tuple[int, float]]:
    """Scored candidates for one user, best first, never including the user."""
    my_skills = skills.get(user_id, EMPTY)
    my_interests = interests.get(user_id, EMPTY)

    scored = []
    for candidate_id in user_ids:
        if candidate_id == user_id:
            continue
        score = score_pair(
            my_skills,
            my_interests,
            skills.get(candidate_id, EMPTY),
            interests.get(candidate_id, EMPTY),
        )
        scored.append((candidate_id, score))

    scored.sort(key=lambda item: (-item[1], item[0]))
    return scored[:top_k]


def generate_recommendations(
    user_ids: Iterable[int],
    skills: Mapping[int, Set[str]],
    interests: Mapping[int, Set[str]],
    top_k: int = DEFAULT_TOP_K,
) -> Dict[int, List[int]]:
    """
    Build the ranked candidate list for every user.

    Args:
        user_ids: All user IDs
        skills: user ID -> lowercased skill names
        interests: user ID -> lowercased interest names
        top_k: Maximum candidates kept per user

    Returns:
        user ID -> candidate IDs, best first
    """
    ids = list(dict.fromkeys(user_ids))
    return {
        user_id: [candidate_id for candidate_id, _ in rank_candidates(user_id, ids, skills, interests, top_k)]
        for user_id in ids
    }


def load_snapshot(db: Session) -> Snapshot:
    return Snapshot(
        user_ids=user_crud.get_all_user_ids(db),
        skills=profile_crud.get_skill_sets(db),
        interests=profile_crud.get_interest_sets(db),
    )


def generate_from_db(db: Session, top_k: int = DEFAULT_TOP_K) -> Dict[int, List[int]]:
    snapshot = load_snapshot(db)
    logger.info("Generating recommendations for %d users", len(snapshot.user_ids))
    return generate_recommendations(snapshot.user_ids, snapshot.skills, snapshot.interests, top_k)


def explain_pair(db: Session, user_id: int, candidate_id: int) -> Dict[str, object]:
    """Complementary skills, shared interests and score for one pair."""
    my_skills = profile_crud.get_user_skill_names(db, user_id)
    my_interests = profile_crud.get_user_interest_names(db, user_id)
    their_skills = profile_crud.get_user_skill_names(db, candidate_id)
    their_interests = profile_crud.get_user_interest_names(db, candidate_id)

    return {
        "candidate_id": candidate_id,
        "complementary_skills": sorted(their_skills - my_skills),
        "shared_interests": sorted(my_interests & their_interests),
        "score": score_pair(my_skills, my_interests, their_skills, their_interests),
        "weight_skill": WEIGHT_SKILL,
        "weight_interest": WEIGHT_INTEREST,
    }
