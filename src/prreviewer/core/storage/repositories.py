"""SQLAlchemy implementations of the store contracts.

Repositories never hand ORM instances to callers: rows are converted into
plain entities right away, and every write is an explicit statement. Reads
use ``populate_existing`` so a row re-read inside the same transaction
reflects earlier writes.
"""
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import (
    PullRequest,
    PullRequestShort,
    PullRequestStatus,
    Statistics,
    Team,
    User,
)
from ..timeutils import to_utc, utcnow
from .base import (
    DirectoryStore,
    DuplicateRecordError,
    PullRequestStore,
    RecordNotFoundError,
    StatisticsStore,
    StoreError,
)
from .tables import PullRequestReviewerRow, PullRequestRow, TeamRow, UserRow


def _to_team(row: TeamRow) -> Team:
    return Team(
        team_name=row.team_name,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


def _to_user(row: UserRow) -> User:
    return User(
        user_id=row.user_id,
        username=row.username,
        team_name=row.team_name,
        is_active=row.is_active,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


def _to_pull_request(row: PullRequestRow, reviewers: list[str]) -> PullRequest:
    return PullRequest(
        pull_request_id=row.pull_request_id,
        pull_request_name=row.pull_request_name,
        author_id=row.author_id,
        status=PullRequestStatus(row.status),
        assigned_reviewers=reviewers,
        created_at=to_utc(row.created_at),
        merged_at=to_utc(row.merged_at),
        version=row.version,
    )


class DirectoryRepository(DirectoryStore):
    """Teams and users backed by the ``teams`` and ``users`` tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def team_exists(self, team_name: str) -> bool:
        result = await self.session.execute(
            select(TeamRow.team_name).where(TeamRow.team_name == team_name)
        )
        return result.scalar_one_or_none() is not None

    async def create_team(self, team: Team) -> None:
        now = utcnow()
        try:
            await self.session.execute(
                insert(TeamRow).values(
                    team_name=team.team_name,
                    created_at=team.created_at or now,
                    updated_at=team.updated_at or now,
                )
            )
        except IntegrityError as e:
            raise DuplicateRecordError(f"team '{team.team_name}' already exists") from e

    async def get_team(self, team_name: str) -> Team:
        result = await self.session.execute(
            select(TeamRow)
            .where(TeamRow.team_name == team_name)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"team '{team_name}' not found")
        return _to_team(row)

    async def get_user(self, user_id: str) -> User:
        result = await self.session.execute(
            select(UserRow)
            .where(UserRow.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"user '{user_id}' not found")
        return _to_user(row)

    async def list_users_by_team(self, team_name: str) -> list[User]:
        return await self._list_users(UserRow.team_name == team_name)

    async def list_active_users_by_team(self, team_name: str) -> list[User]:
        return await self._list_users(
            UserRow.team_name == team_name,
            UserRow.is_active.is_(True),
        )

    async def upsert_users(self, users: list[User]) -> None:
        if not users:
            return

        now = utcnow()
        stmt = self._upsert_insert().values([
            {
                "user_id": user.user_id,
                "username": user.username,
                "team_name": user.team_name,
                "is_active": user.is_active,
                "created_at": user.created_at or now,
                "updated_at": user.updated_at or now,
            }
            for user in users
        ])
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={
                "username": stmt.excluded.username,
                "team_name": stmt.excluded.team_name,
                "is_active": stmt.excluded.is_active,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)

    async def update_user(self, user: User) -> None:
        result = await self.session.execute(
            update(UserRow)
            .where(UserRow.user_id == user.user_id)
            .values(
                username=user.username,
                is_active=user.is_active,
                updated_at=user.updated_at or utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise RecordNotFoundError(f"user '{user.user_id}' not found")

    async def _list_users(self, *criteria) -> list[User]:
        result = await self.session.execute(
            select(UserRow)
            .where(*criteria)
            .order_by(UserRow.username, UserRow.user_id)
            .execution_options(populate_existing=True)
        )
        return [_to_user(row) for row in result.scalars().all()]

    def _upsert_insert(self):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(UserRow)
        if dialect == "sqlite":
            return sqlite.insert(UserRow)
        raise StoreError(f"User upsert is not supported on dialect '{dialect}'")


class PullRequestRepository(PullRequestStore):
    """Pull requests backed by ``pull_requests`` and ``pr_reviewers``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, pull_request_id: str) -> bool:
        result = await self.session.execute(
            select(PullRequestRow.pull_request_id).where(
                PullRequestRow.pull_request_id == pull_request_id
            )
        )
        return result.scalar_one_or_none() is not None

    async def create(self, pull_request: PullRequest) -> None:
        try:
            await self.session.execute(
                insert(PullRequestRow).values(
                    pull_request_id=pull_request.pull_request_id,
                    pull_request_name=pull_request.pull_request_name,
                    author_id=pull_request.author_id,
                    status=pull_request.status.value,
                    version=pull_request.version,
                    created_at=pull_request.created_at or utcnow(),
                    merged_at=pull_request.merged_at,
                )
            )
        except IntegrityError as e:
            raise DuplicateRecordError(
                f"pull request '{pull_request.pull_request_id}' already exists"
            ) from e

        await self._write_reviewers(pull_request)

    async def update(self, pull_request: PullRequest) -> None:
        result = await self.session.execute(
            update(PullRequestRow)
            .where(
                PullRequestRow.pull_request_id == pull_request.pull_request_id,
                PullRequestRow.version == pull_request.version,
            )
            .values(
                pull_request_name=pull_request.pull_request_name,
                status=pull_request.status.value,
                merged_at=pull_request.merged_at,
                version=PullRequestRow.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise RecordNotFoundError(
                f"pull request '{pull_request.pull_request_id}' not found "
                f"at version {pull_request.version}"
            )

        await self.session.execute(
            delete(PullRequestReviewerRow)
            .where(PullRequestReviewerRow.pull_request_id == pull_request.pull_request_id)
            .execution_options(synchronize_session=False)
        )
        await self._write_reviewers(pull_request)
        pull_request.version += 1

    async def get(self, pull_request_id: str) -> PullRequest:
        result = await self.session.execute(
            select(PullRequestRow)
            .where(PullRequestRow.pull_request_id == pull_request_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"pull request '{pull_request_id}' not found")

        reviewers = await self._load_reviewers([row.pull_request_id])
        return _to_pull_request(row, reviewers.get(row.pull_request_id, []))

    async def list_open_by_reviewer(self, user_id: str) -> list[PullRequest]:
        result = await self.session.execute(
            select(PullRequestRow)
            .join(
                PullRequestReviewerRow,
                PullRequestReviewerRow.pull_request_id == PullRequestRow.pull_request_id,
            )
            .where(
                PullRequestReviewerRow.reviewer_id == user_id,
                PullRequestRow.status == PullRequestStatus.OPEN.value,
            )
            .order_by(PullRequestRow.created_at, PullRequestRow.pull_request_id)
            .execution_options(populate_existing=True)
        )
        rows = list(result.scalars().all())
        reviewers = await self._load_reviewers([row.pull_request_id for row in rows])
        return [
            _to_pull_request(row, reviewers.get(row.pull_request_id, []))
            for row in rows
        ]

    async def list_by_reviewer(self, user_id: str) -> list[PullRequestShort]:
        result = await self.session.execute(
            select(
                PullRequestRow.pull_request_id,
                PullRequestRow.pull_request_name,
                PullRequestRow.author_id,
                PullRequestRow.status,
            )
            .join(
                PullRequestReviewerRow,
                PullRequestReviewerRow.pull_request_id == PullRequestRow.pull_request_id,
            )
            .where(PullRequestReviewerRow.reviewer_id == user_id)
            .order_by(PullRequestRow.created_at.desc(), PullRequestRow.pull_request_id)
        )
        return [
            PullRequestShort(
                pull_request_id=pr_id,
                pull_request_name=name,
                author_id=author_id,
                status=PullRequestStatus(status),
            )
            for pr_id, name, author_id, status in result.all()
        ]

    async def _load_reviewers(self, pull_request_ids: list[str]) -> dict[str, list[str]]:
        if not pull_request_ids:
            return {}

        result = await self.session.execute(
            select(PullRequestReviewerRow.pull_request_id, PullRequestReviewerRow.reviewer_id)
            .where(PullRequestReviewerRow.pull_request_id.in_(pull_request_ids))
            .order_by(PullRequestReviewerRow.pull_request_id, PullRequestReviewerRow.position)
        )
        reviewers: dict[str, list[str]] = {}
        for pull_request_id, reviewer_id in result.all():
            reviewers.setdefault(pull_request_id, []).append(reviewer_id)
        return reviewers

    async def _write_reviewers(self, pull_request: PullRequest) -> None:
        if not pull_request.assigned_reviewers:
            return

        await self.session.execute(
            insert(PullRequestReviewerRow),
            [
                {
                    "pull_request_id": pull_request.pull_request_id,
                    "reviewer_id": reviewer_id,
                    "position": position,
                }
                for position, reviewer_id in enumerate(pull_request.assigned_reviewers)
            ],
        )


class StatisticsRepository(StatisticsStore):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_statistics(self) -> Statistics:
        stats = Statistics()

        stats.total_prs = await self._count(select(func.count()).select_from(PullRequestRow))
        stats.open_prs = await self._count(
            select(func.count())
            .select_from(PullRequestRow)
            .where(PullRequestRow.status == PullRequestStatus.OPEN.value)
        )
        stats.merged_prs = await self._count(
            select(func.count())
            .select_from(PullRequestRow)
            .where(PullRequestRow.status == PullRequestStatus.MERGED.value)
        )

        # Assignments per user, users without any assignment included
        result = await self.session.execute(
            select(UserRow.username, func.count(PullRequestReviewerRow.id))
            .select_from(UserRow)
            .outerjoin(PullRequestReviewerRow, PullRequestReviewerRow.reviewer_id == UserRow.user_id)
            .group_by(UserRow.user_id, UserRow.username)
        )
        for username, count in result.all():
            stats.assignments_by_user[username] = stats.assignments_by_user.get(username, 0) + count

        # Reviewer count per pull request
        result = await self.session.execute(
            select(PullRequestRow.pull_request_id, func.count(PullRequestReviewerRow.id))
            .select_from(PullRequestRow)
            .outerjoin(
                PullRequestReviewerRow,
                PullRequestReviewerRow.pull_request_id == PullRequestRow.pull_request_id,
            )
            .group_by(PullRequestRow.pull_request_id)
        )
        stats.assignments_by_pr = {pr_id: count for pr_id, count in result.all()}

        stats.total_teams = await self._count(select(func.count()).select_from(TeamRow))
        stats.total_users = await self._count(select(func.count()).select_from(UserRow))
        stats.active_users = await self._count(
            select(func.count()).select_from(UserRow).where(UserRow.is_active.is_(True))
        )

        return stats

    async def _count(self, stmt) -> int:
        result = await self.session.execute(stmt)
        return result.scalar_one()
