"""Statistics service."""
from typing import Optional

from .models import Statistics
from .storage.base import Transaction, UnitOfWork


class StatisticsService:
    """Read-only aggregate view over teams, users and assignments."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_statistics(self, tx: Optional[Transaction] = None) -> Statistics:
        async def _collect(tx: Transaction) -> Statistics:
            return await tx.statistics.get_statistics()

        return await self.uow.run(_collect, tx=tx)
