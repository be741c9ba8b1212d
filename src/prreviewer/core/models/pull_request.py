"""Pull request entity and its lifecycle rules."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

# Hard cap on reviewers per pull request.
MAX_REVIEWERS = 2


class PullRequestStatus(str, Enum):
    """Lifecycle status of a pull request. OPEN -> MERGED is the only transition."""
    OPEN = "OPEN"
    MERGED = "MERGED"


@dataclass
class PullRequest:
    """A pull request with its ordered reviewer slots.

    Invariants checked on construction and on every reviewer mutation:
    the author never reviews, reviewer ids are unique, and there are at most
    ``MAX_REVIEWERS`` slots. ``version`` is the optimistic-concurrency token
    maintained by the store.
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None
    version: int = 0

    def __post_init__(self) -> None:
        self.status = PullRequestStatus(self.status)
        self.assigned_reviewers = list(self.assigned_reviewers)
        self._check_reviewers(self.assigned_reviewers)

    @property
    def is_merged(self) -> bool:
        return self.status == PullRequestStatus.MERGED

    def reviewer_slot(self, user_id: str) -> Optional[int]:
        """Return the slot index held by ``user_id``, or None if not assigned."""
        try:
            return self.assigned_reviewers.index(user_id)
        except ValueError:
            return None

    def replace_reviewer(self, old_user_id: str, new_user_id: str) -> int:
        """Put ``new_user_id`` into the slot held by ``old_user_id``.

        Returns:
            Index of the replaced slot

        Raises:
            ValueError: If the pull request is merged, ``old_user_id`` holds no
                slot, or the replacement would break a reviewer invariant
        """
        self._ensure_open()
        slot = self.reviewer_slot(old_user_id)
        if slot is None:
            raise ValueError(f"{old_user_id} is not a reviewer of {self.pull_request_id}")
        reviewers = list(self.assigned_reviewers)
        reviewers[slot] = new_user_id
        self._check_reviewers(reviewers)
        self.assigned_reviewers = reviewers
        return slot

    def remove_reviewer(self, user_id: str) -> int:
        """Drop the slot held by ``user_id``; later slots shift up by one."""
        self._ensure_open()
        slot = self.reviewer_slot(user_id)
        if slot is None:
            raise ValueError(f"{user_id} is not a reviewer of {self.pull_request_id}")
        del self.assigned_reviewers[slot]
        return slot

    def mark_merged(self, merged_at: datetime) -> bool:
        """Transition to MERGED. Returns False (and changes nothing) if already merged."""
        if self.is_merged:
            return False
        self.status = PullRequestStatus.MERGED
        self.merged_at = merged_at
        return True

    def _ensure_open(self) -> None:
        if self.is_merged:
            raise ValueError(f"pull request {self.pull_request_id} is merged")

    def _check_reviewers(self, reviewers: list[str]) -> None:
        if len(reviewers) > MAX_REVIEWERS:
            raise ValueError(
                f"pull request {self.pull_request_id} cannot have more than "
                f"{MAX_REVIEWERS} reviewers"
            )
        if len(set(reviewers)) != len(reviewers):
            raise ValueError(f"duplicate reviewer on pull request {self.pull_request_id}")
        if self.author_id in reviewers:
            raise ValueError(f"author {self.author_id} cannot review own pull request")

    def __repr__(self) -> str:
        return (
            f"<PullRequest(id='{self.pull_request_id}', status='{self.status.value}', "
            f"reviewers={self.assigned_reviewers})>"
        )


@dataclass(frozen=True)
class PullRequestShort:
    """Summary row used when listing a user's reviews."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
