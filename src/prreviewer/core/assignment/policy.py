"""Reviewer selection policy - uniform random choice from an eligible pool.

The policy is pure: callers load the candidate pool (one team's active
users) and state who must be excluded; the policy only decides. The random
source is injectable so tests can replay exact choices; production wiring
shares one process-wide generator.
"""
import random
from typing import Iterable, Optional

from ..models import MAX_REVIEWERS, User

# Process-wide random source used when no generator is injected
_shared_rng = random.Random()


def seed_shared_random(seed: Optional[int]) -> None:
    """Reseed the process-wide random source (None reseeds from system entropy)."""
    _shared_rng.seed(seed)


class ReviewerSelectionPolicy:
    """Picks reviewers uniformly at random, without replacement.

    Usage:
        policy = ReviewerSelectionPolicy(random.Random(42))
        reviewer_ids = policy.select_reviewers(team_members, exclude={author_id})
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or _shared_rng

    def eligible(self, pool: Iterable[User], exclude: Iterable[str]) -> list[str]:
        """Return ids of active pool members not in ``exclude``, in pool order."""
        excluded = set(exclude)
        candidates: list[str] = []
        for user in pool:
            if not user.is_active or user.user_id in excluded:
                continue
            excluded.add(user.user_id)
            candidates.append(user.user_id)
        return candidates

    def select_reviewers(
        self,
        pool: Iterable[User],
        exclude: Iterable[str],
        max_count: int = MAX_REVIEWERS,
    ) -> list[str]:
        """Select up to ``max_count`` distinct reviewers.

        Args:
            pool: Candidate users, already narrowed to one team
            exclude: User ids that must not be picked (author, current reviewers)
            max_count: Upper bound on the number of picks

        Returns:
            Ordered reviewer ids; empty when nobody is eligible
        """
        candidates = self.eligible(pool, exclude)
        count = min(max_count, len(candidates))
        if count <= 0:
            return []
        return self._rng.sample(candidates, count)

    def pick_replacement(self, pool: Iterable[User], exclude: Iterable[str]) -> Optional[str]:
        """Select a single replacement reviewer, or None when there is no candidate."""
        picked = self.select_reviewers(pool, exclude, max_count=1)
        return picked[0] if picked else None
