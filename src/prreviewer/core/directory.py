"""Directory service - teams, team members and user activity."""
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from .errors import NotFoundError, TeamExistsError
from .models import PullRequestShort, Team, TeamMember, TeamWithMembers, User
from .storage.base import DuplicateRecordError, RecordNotFoundError, Transaction, UnitOfWork
from .timeutils import utcnow

logger = logging.getLogger(__name__)


class DirectoryService:
    """Owns team existence and the activity flag of users."""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def create_team(
        self,
        team_name: str,
        members: Iterable[TeamMember],
        tx: Optional[Transaction] = None,
    ) -> TeamWithMembers:
        """Create a team and upsert its members.

        Members that already exist under another team are moved into this
        one. If the same user id is listed twice, the last entry wins.

        Args:
            team_name: Unique team name
            members: Members to create or update

        Returns:
            The created team with its members

        Raises:
            TeamExistsError: If the team name is already taken
        """
        unique_members = list({member.user_id: member for member in members}.values())

        async def _create(tx: Transaction) -> TeamWithMembers:
            if await tx.directory.team_exists(team_name):
                raise TeamExistsError()

            now = self.clock()
            try:
                await tx.directory.create_team(
                    Team(team_name=team_name, created_at=now, updated_at=now)
                )
            except DuplicateRecordError as e:
                raise TeamExistsError() from e

            await tx.directory.upsert_users([
                User(
                    user_id=member.user_id,
                    username=member.username,
                    team_name=team_name,
                    is_active=member.is_active,
                    created_at=now,
                    updated_at=now,
                )
                for member in unique_members
            ])

            logger.info(f"Created team {team_name} with {len(unique_members)} members")
            return TeamWithMembers(team_name=team_name, members=unique_members)

        return await self.uow.run(_create, tx=tx)

    async def get_team(self, team_name: str, tx: Optional[Transaction] = None) -> TeamWithMembers:
        """Return a team with its members ordered by username.

        Raises:
            NotFoundError: If the team does not exist
        """
        async def _get(tx: Transaction) -> TeamWithMembers:
            if not await tx.directory.team_exists(team_name):
                raise NotFoundError("team not found")

            users = await tx.directory.list_users_by_team(team_name)
            return TeamWithMembers(
                team_name=team_name,
                members=[
                    TeamMember(user_id=u.user_id, username=u.username, is_active=u.is_active)
                    for u in users
                ],
            )

        return await self.uow.run(_get, tx=tx)

    async def set_is_active(
        self, user_id: str, is_active: bool, tx: Optional[Transaction] = None
    ) -> User:
        """Set a user's activity flag. Existing reviewer slots are left as they are.

        Raises:
            NotFoundError: If the user does not exist
        """
        async def _set(tx: Transaction) -> User:
            try:
                user = await tx.directory.get_user(user_id)
                user.is_active = is_active
                user.updated_at = self.clock()
                await tx.directory.update_user(user)
            except RecordNotFoundError as e:
                raise NotFoundError("user not found") from e

            logger.info(f"Set is_active={is_active} for user {user_id}")
            return user

        return await self.uow.run(_set, tx=tx)

    async def get_user_reviews(
        self, user_id: str, tx: Optional[Transaction] = None
    ) -> list[PullRequestShort]:
        """List pull requests on which the user is a reviewer, newest first.

        Raises:
            NotFoundError: If the user does not exist
        """
        async def _list(tx: Transaction) -> list[PullRequestShort]:
            try:
                await tx.directory.get_user(user_id)
            except RecordNotFoundError as e:
                raise NotFoundError("user not found") from e
            return await tx.pull_requests.list_by_reviewer(user_id)

        return await self.uow.run(_list, tx=tx)
