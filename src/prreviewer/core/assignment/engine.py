"""Assignment engine - creation, merge, reassignment and bulk deactivation.

Every public operation runs inside one unit of work: all reads observe the
same transaction, and a raised error (domain or store) rolls back every
write made by the operation. Pass ``tx`` to join a transaction that is
already open instead of starting a new one.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..errors import (
    DomainError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
)
from ..models import MAX_REVIEWERS, PullRequest, PullRequestStatus, User
from ..storage.base import (
    DuplicateRecordError,
    RecordNotFoundError,
    StoreError,
    Transaction,
    UnitOfWork,
)
from ..timeutils import utcnow
from .policy import ReviewerSelectionPolicy

logger = logging.getLogger(__name__)


@dataclass
class DeactivationResult:
    """Outcome of a bulk team deactivation."""
    deactivated_count: int = 0
    reassigned_count: int = 0
    user_ids: list[str] = field(default_factory=list)
    # Pull requests left untouched because their reassignment failed
    skipped_pull_requests: list[str] = field(default_factory=list)


class AssignmentEngine:
    """Decides and persists reviewer assignments for pull requests."""

    def __init__(
        self,
        uow: UnitOfWork,
        policy: Optional[ReviewerSelectionPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize the engine.

        Args:
            uow: Unit of work every operation runs in
            policy: Reviewer selection policy (defaults to the shared random source)
            clock: Source of "now" for created/merged timestamps
        """
        self.uow = uow
        self.policy = policy or ReviewerSelectionPolicy()
        self.clock = clock

    async def create_pull_request(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
        tx: Optional[Transaction] = None,
    ) -> PullRequest:
        """Create an OPEN pull request with up to two reviewers from the author's team.

        Raises:
            PullRequestExistsError: If the id is already taken
            NotFoundError: If the author does not exist
        """
        async def _create(tx: Transaction) -> PullRequest:
            if await tx.pull_requests.exists(pull_request_id):
                raise PullRequestExistsError()

            author = await self._load_user(tx, author_id, "author not found")
            pool = await tx.directory.list_active_users_by_team(author.team_name)
            reviewers = self.policy.select_reviewers(
                pool, exclude={author.user_id}, max_count=MAX_REVIEWERS
            )

            pull_request = PullRequest(
                pull_request_id=pull_request_id,
                pull_request_name=pull_request_name,
                author_id=author.user_id,
                status=PullRequestStatus.OPEN,
                assigned_reviewers=reviewers,
                created_at=self.clock(),
                merged_at=None,
            )
            try:
                await tx.pull_requests.create(pull_request)
            except DuplicateRecordError as e:
                # Lost a race against a concurrent create with the same id
                raise PullRequestExistsError() from e

            logger.info(
                f"Created pull request {pull_request_id} by {author_id} "
                f"with reviewers {reviewers}"
            )
            return pull_request

        return await self.uow.run(_create, tx=tx)

    async def merge_pull_request(
        self, pull_request_id: str, tx: Optional[Transaction] = None
    ) -> PullRequest:
        """Mark a pull request MERGED. Merging an already merged pull request is a no-op.

        Raises:
            NotFoundError: If the pull request does not exist
        """
        async def _merge(tx: Transaction) -> PullRequest:
            pull_request = await self._load_pull_request(tx, pull_request_id)
            if not pull_request.mark_merged(self.clock()):
                return pull_request

            await tx.pull_requests.update(pull_request)
            logger.info(f"Merged pull request {pull_request_id}")
            return pull_request

        return await self.uow.run(_merge, tx=tx)

    async def reassign_reviewer(
        self,
        pull_request_id: str,
        old_user_id: str,
        tx: Optional[Transaction] = None,
    ) -> tuple[PullRequest, str]:
        """Swap one reviewer for a random active member of that reviewer's team.

        The new reviewer takes over the old reviewer's slot; other slots are
        untouched.

        Returns:
            Tuple of (updated pull request, new reviewer id)

        Raises:
            NotFoundError: If the pull request or the old reviewer does not exist
            PullRequestMergedError: If the pull request is merged
            NotAssignedError: If ``old_user_id`` is not a reviewer of it
            NoCandidateError: If nobody in the team can take the slot
        """
        async def _reassign(tx: Transaction) -> tuple[PullRequest, str]:
            pull_request = await self._load_pull_request(tx, pull_request_id)
            if pull_request.is_merged:
                raise PullRequestMergedError()
            if pull_request.reviewer_slot(old_user_id) is None:
                raise NotAssignedError()

            old_reviewer = await self._load_user(tx, old_user_id, "old reviewer not found")
            new_reviewer_id = await self._find_replacement(tx, pull_request, old_reviewer)
            if new_reviewer_id is None:
                raise NoCandidateError()

            slot = pull_request.replace_reviewer(old_user_id, new_reviewer_id)
            await tx.pull_requests.update(pull_request)

            logger.info(
                f"Reassigned pull request {pull_request_id} slot {slot}: "
                f"{old_user_id} -> {new_reviewer_id}"
            )
            return pull_request, new_reviewer_id

        return await self.uow.run(_reassign, tx=tx)

    async def deactivate_team_members(
        self, team_name: str, tx: Optional[Transaction] = None
    ) -> DeactivationResult:
        """Deactivate every active member of a team and release their open reviews.

        Each open pull request reviewed by a deactivated user gets a
        replacement from that user's team, or loses the slot when nobody is
        eligible. A pull request whose reassignment fails for any other reason
        is rolled back to its prior reviewers and skipped; the rest of the
        operation still commits.

        Raises:
            NotFoundError: If the team does not exist
        """
        async def _deactivate(tx: Transaction) -> DeactivationResult:
            if not await tx.directory.team_exists(team_name):
                raise NotFoundError("team not found")

            result = DeactivationResult()
            now = self.clock()
            deactivated: list[User] = []
            for user in await tx.directory.list_users_by_team(team_name):
                if not user.is_active:
                    continue
                user.is_active = False
                user.updated_at = now
                await tx.directory.update_user(user)
                deactivated.append(user)

            result.user_ids = [user.user_id for user in deactivated]
            result.deactivated_count = len(deactivated)

            for user in deactivated:
                for pull_request in await tx.pull_requests.list_open_by_reviewer(user.user_id):
                    try:
                        async with tx.savepoint():
                            await self._release_reviewer(tx, pull_request, user)
                    except (StoreError, DomainError) as e:
                        if pull_request.pull_request_id not in result.skipped_pull_requests:
                            result.skipped_pull_requests.append(pull_request.pull_request_id)
                        logger.warning(
                            f"Skipped reassignment of {user.user_id} on pull request "
                            f"{pull_request.pull_request_id}: {e}",
                            extra={
                                "team_name": team_name,
                                "pull_request_id": pull_request.pull_request_id,
                                "user_id": user.user_id,
                                "error": type(e).__name__,
                            },
                        )
                        continue
                    result.reassigned_count += 1

            logger.info(
                f"Deactivated {result.deactivated_count} members of team {team_name}, "
                f"reassigned {result.reassigned_count} pull requests, "
                f"skipped {len(result.skipped_pull_requests)}"
            )
            return result

        return await self.uow.run(_deactivate, tx=tx)

    async def _release_reviewer(
        self, tx: Transaction, pull_request: PullRequest, reviewer: User
    ) -> None:
        """Replace a deactivated reviewer, or drop the slot if nobody is eligible."""
        replacement = await self._find_replacement(tx, pull_request, reviewer)
        if replacement is None:
            pull_request.remove_reviewer(reviewer.user_id)
            logger.info(
                f"No replacement for {reviewer.user_id} on pull request "
                f"{pull_request.pull_request_id}; slot removed"
            )
        else:
            pull_request.replace_reviewer(reviewer.user_id, replacement)
            logger.info(
                f"Reassigned pull request {pull_request.pull_request_id}: "
                f"{reviewer.user_id} -> {replacement}"
            )
        await tx.pull_requests.update(pull_request)

    async def _find_replacement(
        self, tx: Transaction, pull_request: PullRequest, reviewer: User
    ) -> Optional[str]:
        pool = await tx.directory.list_active_users_by_team(reviewer.team_name)
        exclude = {pull_request.author_id, *pull_request.assigned_reviewers}
        return self.policy.pick_replacement(pool, exclude)

    @staticmethod
    async def _load_pull_request(tx: Transaction, pull_request_id: str) -> PullRequest:
        try:
            return await tx.pull_requests.get(pull_request_id)
        except RecordNotFoundError as e:
            raise NotFoundError("PR not found") from e

    @staticmethod
    async def _load_user(tx: Transaction, user_id: str, message: str) -> User:
        try:
            return await tx.directory.get_user(user_id)
        except RecordNotFoundError as e:
            raise NotFoundError(message) from e
