# app/services/data_cache.py
"""
Read-through cache of the organisation reference data.

Users, teams, departments and team memberships are always fetched together
and cached as one snapshot for ``CACHE_TTL_SECONDS``. While a refresh is in
flight every caller awaits that same refresh instead of issuing its own
requests.
"""
import asyncio
import logging
import time
from typing import Callable, List, Optional
from pydantic import BaseModel, Field

from app.config.settings import settings
from app.models import Department, Team, TeamMembership, User
from app.services.api_client import ApiClient
from app.services.department_service import DepartmentService
from app.services.team_service import TeamService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


class OrganizationSnapshot(BaseModel):
    users: List[User] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)
    departments: List[Department] = Field(default_factory=list)
    team_members: List[TeamMembership] = Field(default_factory=list)
    loaded_at: float = 0.0


class DataCache:
    def __init__(
        self,
        load_users: Callable[[], List[User]],
        load_teams: Callable[[], List[Team]],
        load_departments: Callable[[], List[Department]],
        load_team_members: Callable[[], List[TeamMembership]],
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._load_users = load_users
        self._load_teams = load_teams
        self._load_departments = load_departments
        self._load_team_members = load_team_members
        self.ttl = ttl if ttl is not None else settings.CACHE_TTL_SECONDS
        self._clock = clock

        self._snapshot: Optional[OrganizationSnapshot] = None
        self._loading: Optional[asyncio.Task] = None
        # Bumped by invalidate(); a refresh only publishes into the generation it started in
        self._generation = 0

    @classmethod
    def from_api(cls, api_client, **kwargs) -> "DataCache":
        """Cache backed by the hosted API's user, team and department services"""
        users = UserService(api_client)
        teams = TeamService(api_client)
        departments = DepartmentService(api_client)
        return cls(
            load_users=users.get_users,
            load_teams=teams.get_all,
            load_departments=departments.get_all,
            load_team_members=teams.get_all_members,
            **kwargs
        )

    def is_valid(self) -> bool:
        """Whether a snapshot exists and is younger than the TTL"""
        return self._snapshot is not None and self._clock() - self._snapshot.loaded_at < self.ttl

    async def _refresh(self, generation: int) -> OrganizationSnapshot:
        try:
            logger.info("Cache: loading users, teams, departments and team members")
            users, teams, departments, team_members = await asyncio.gather(
                asyncio.to_thread(self._load_users),
                asyncio.to_thread(self._load_teams),
                asyncio.to_thread(self._load_departments),
                asyncio.to_thread(self._load_team_members),
            )
            snapshot = OrganizationSnapshot(
                users=users or [],
                teams=teams or [],
                departments=departments or [],
                team_members=team_members or [],
                loaded_at=self._clock(),
            )
            if generation == self._generation:
                self._snapshot = snapshot
                logger.info("Cache: data loaded successfully")
            else:
                logger.debug("Cache: discarding refresh started before invalidation")
            return snapshot
        except Exception as e:
            logger.error(f"Cache: error loading data: {str(e)}")
            raise
        finally:
            if generation == self._generation:
                self._loading = None

    async def get_all(self) -> OrganizationSnapshot:
        if self.is_valid():
            return self._snapshot

        loop = asyncio.get_running_loop()
        task = self._loading
        if task is None or task.get_loop() is not loop:
            task = loop.create_task(self._refresh(self._generation))
            self._loading = task

        # Cancelling one caller leaves the shared fetch running
        return await asyncio.shield(task)

    async def load_all(self) -> None:
        await self.get_all()

    async def get_users(self) -> List[User]:
        return list((await self.get_all()).users)

    async def get_teams(self) -> List[Team]:
        return list((await self.get_all()).teams)

    async def get_departments(self) -> List[Department]:
        return list((await self.get_all()).departments)

    async def get_team_members(self) -> List[TeamMembership]:
        return list((await self.get_all()).team_members)

    def invalidate(self) -> None:
        """Drop the snapshot; the next read fetches again"""
        logger.info("Cache: invalidated")
        self._generation += 1
        self._snapshot = None
        self._loading = None

    async def reload(self) -> OrganizationSnapshot:
        self.invalidate()
        return await self.get_all()


# Global instance
data_cache = DataCache.from_api(ApiClient())
