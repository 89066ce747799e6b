# app/store.py
"""
In-memory relational store for demo (non-networked) mode.

Holds users, teams and departments (plus organizational competencies and
PDIs) and keeps the denormalized relationship fields consistent:

* every team's leader is one of its members;
* ``team.id in user.team_ids`` exactly when ``user.id in team.member_ids``;
* ``team.id in user.leader_of_team_ids`` exactly when ``team.leader_id == user.id``;
* ``user.department_ids`` is the set of departments of the user's teams;
* reports-to links never form a cycle.

Every mutation runs inside one critical section: the collections are
snapshotted, the change and its fan-out are applied, derived fields are
recomputed and the result is persisted. Any error restores the snapshot, so a
rejected mutation leaves the collections exactly as they were.
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from pydantic import BaseModel

from app.exceptions import EntityNotFoundError, InvariantError, StoreError
from app.models import (
    Department,
    OrganizationalCompetency,
    PdiRecord,
    Team,
    TeamMembership,
    User,
)
from app.schemas.competency import CompetencyCreate, CompetencyUpdate
from app.schemas.department import DepartmentCreate, DepartmentUpdate
from app.schemas.pdi import PdiCreate
from app.schemas.team import TeamCreate, TeamUpdate
from app.schemas.user import UserCreate, UserUpdate
from app.services.local_storage import LocalStorage
from app.services.notification_service import NotificationService
from app.utils.hierarchy import HierarchyManager

logger = logging.getLogger(__name__)

USERS_KEY = "users"
TEAMS_KEY = "teams"
DEPARTMENTS_KEY = "departments"
COMPETENCIES_KEY = "competencies"
PDIS_KEY = "pdis"

# Administrative team every director belongs to
DIRECTOR_TEAM_NAME = "Diretoria"
DIRECTOR_TEAM_DEPARTMENT = "Gente & Gestão"

Payload = Union[BaseModel, Dict[str, Any]]


def default_id_factory(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _unique(ids: Iterable[str]) -> List[str]:
    """Drop duplicates and blanks, keeping first-seen order"""
    seen = set()
    result = []
    for item in ids:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _coerce(payload: Payload, schema):
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    return schema.model_validate(payload)


class RelationalStore:
    """Users, teams and departments with fan-out-on-write relationship upkeep"""

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        notifier: Optional[NotificationService] = None,
        id_factory: Optional[Callable[[str], str]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.storage = storage
        self.notifier = notifier or NotificationService()
        self._id_factory = id_factory or default_id_factory
        self._clock = clock or datetime.now
        self._lock = threading.RLock()

        self._users: List[User] = []
        self._teams: List[Team] = []
        self._departments: List[Department] = []
        self._competencies: List[OrganizationalCompetency] = []
        self._pdis: List[PdiRecord] = []

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        storage: LocalStorage,
        seed: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        **kwargs
    ) -> "RelationalStore":
        """Restore a store from storage, seeding it when storage holds no organisation yet"""
        store = cls(storage=storage, **kwargs)
        data = {
            key: storage.get_item(key)
            for key in (USERS_KEY, TEAMS_KEY, DEPARTMENTS_KEY, COMPETENCIES_KEY, PDIS_KEY)
        }

        if data[USERS_KEY] is None and data[TEAMS_KEY] is None and data[DEPARTMENTS_KEY] is None:
            if seed:
                logger.info("Local storage is empty, seeding demo organisation")
                store.replace_all(seed)
            return store

        store.replace_all(data)
        logger.info(
            f"Loaded {len(store._users)} users, {len(store._teams)} teams, "
            f"{len(store._departments)} departments from local storage"
        )
        return store

    def replace_all(self, data: Dict[str, Optional[List[Dict[str, Any]]]]) -> None:
        """
        Replace every collection with raw records.

        Team records are authoritative for membership and leadership: the
        user-side fields are rebuilt from them, so seed data only needs
        ``member_ids``/``leader_id`` on teams.
        """
        with self._mutation():
            self._departments = [Department.model_validate(d) for d in data.get(DEPARTMENTS_KEY) or []]
            self._teams = [Team.model_validate(t) for t in data.get(TEAMS_KEY) or []]
            self._users = [User.model_validate(u) for u in data.get(USERS_KEY) or []]
            self._competencies = [
                OrganizationalCompetency.model_validate(c) for c in data.get(COMPETENCIES_KEY) or []
            ]
            self._pdis = [PdiRecord.model_validate(p) for p in data.get(PDIS_KEY) or []]
            self._rebuild_from_teams()

    def _persist(self) -> None:
        """Mirror every collection to local storage; failures are logged, never raised"""
        if self.storage is None:
            return
        collections = {
            USERS_KEY: self._users,
            TEAMS_KEY: self._teams,
            DEPARTMENTS_KEY: self._departments,
            COMPETENCIES_KEY: self._competencies,
            PDIS_KEY: self._pdis,
        }
        for key, records in collections.items():
            try:
                self.storage.set_item(key, [record.model_dump(mode="json") for record in records])
            except Exception as e:
                logger.error(f"Error persisting '{key}' to local storage: {str(e)}")

    # ------------------------------------------------------------------
    # Critical section
    # ------------------------------------------------------------------

    def _state(self) -> Dict[str, List[BaseModel]]:
        return {
            USERS_KEY: [u.model_copy(deep=True) for u in self._users],
            TEAMS_KEY: [t.model_copy(deep=True) for t in self._teams],
            DEPARTMENTS_KEY: [d.model_copy(deep=True) for d in self._departments],
            COMPETENCIES_KEY: [c.model_copy(deep=True) for c in self._competencies],
            PDIS_KEY: [p.model_copy(deep=True) for p in self._pdis],
        }

    def _restore(self, state: Dict[str, List[BaseModel]]) -> None:
        self._users = state[USERS_KEY]
        self._teams = state[TEAMS_KEY]
        self._departments = state[DEPARTMENTS_KEY]
        self._competencies = state[COMPETENCIES_KEY]
        self._pdis = state[PDIS_KEY]

    @contextmanager
    def _mutation(self):
        with self._lock:
            backup = self._state()
            try:
                yield
                self._recompute_department_ids()
            except StoreError as e:
                self._restore(backup)
                logger.warning(f"Store mutation rejected: {e.message}")
                self.notifier.error(e.message)
                raise
            except Exception:
                self._restore(backup)
                raise
            self._persist()

    # ------------------------------------------------------------------
    # Internal lookups and fan-out helpers (callers hold the lock)
    # ------------------------------------------------------------------

    def _find_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self._users if u.id == user_id), None)

    def _find_team(self, team_id: str) -> Optional[Team]:
        return next((t for t in self._teams if t.id == team_id), None)

    def _find_department(self, department_id: str) -> Optional[Department]:
        return next((d for d in self._departments if d.id == department_id), None)

    def _require_user(self, user_id: str) -> User:
        user = self._find_user(user_id)
        if not user:
            raise EntityNotFoundError("User", user_id)
        return user

    def _require_team(self, team_id: str) -> Team:
        team = self._find_team(team_id)
        if not team:
            raise EntityNotFoundError("Team", team_id)
        return team

    def _require_department(self, department_id: str) -> Department:
        department = self._find_department(department_id)
        if not department:
            raise EntityNotFoundError("Department", department_id)
        return department

    def _check_email_free(self, email: str, exclude_id: Optional[str] = None) -> None:
        for user in self._users:
            if user.id != exclude_id and user.email.lower() == email.lower():
                raise InvariantError("Email already registered")

    def _check_team_name_free(self, name: str, exclude_id: Optional[str] = None) -> None:
        for team in self._teams:
            if team.id != exclude_id and team.name.strip().lower() == name.strip().lower():
                raise InvariantError("Team name already exists")

    def _check_superior(self, user_id: Optional[str], superior_id: str) -> None:
        self._require_user(superior_id)
        if user_id and HierarchyManager(self).would_create_cycle(user_id, superior_id):
            raise InvariantError("A user cannot report to themselves or to one of their subordinates.")

    @staticmethod
    def _add_member(team: Team, user: User) -> None:
        if user.id not in team.member_ids:
            team.member_ids.append(user.id)
        if team.id not in user.team_ids:
            user.team_ids.append(team.id)

    @staticmethod
    def _remove_member(team: Team, user: User) -> None:
        team.member_ids = [member_id for member_id in team.member_ids if member_id != user.id]
        user.team_ids = [team_id for team_id in user.team_ids if team_id != team.id]

    def _set_leader(self, team: Team, leader: User) -> None:
        previous = self._find_user(team.leader_id) if team.leader_id != leader.id else None
        if previous:
            previous.leader_of_team_ids = [t for t in previous.leader_of_team_ids if t != team.id]
        team.leader_id = leader.id
        self._add_member(team, leader)
        if team.id not in leader.leader_of_team_ids:
            leader.leader_of_team_ids.append(team.id)
        leader.is_leader = True

    def _find_director_team(self) -> Optional[Team]:
        return next((t for t in self._teams if t.name.strip().lower() == DIRECTOR_TEAM_NAME.lower()), None)

    def _join_director_team(self, director: User) -> None:
        """Add a director to the Diretoria team, creating it (led by them) when missing"""
        team = self._find_director_team()
        if team:
            self._add_member(team, director)
            return

        if not self._departments:
            logger.warning(f"No department can hold the {DIRECTOR_TEAM_NAME} team; director {director.id} joins no team")
            return
        department = next(
            (d for d in self._departments if d.name == DIRECTOR_TEAM_DEPARTMENT),
            self._departments[0]
        )
        team = Team(
            id=self._id_factory("team"),
            name=DIRECTOR_TEAM_NAME,
            department_id=department.id,
            leader_id=director.id,
            created_at=self._clock(),
        )
        self._teams.append(team)
        self._set_leader(team, director)
        logger.info(f"Created the {DIRECTOR_TEAM_NAME} team in department {department.id}")

    def _recompute_department_ids(self) -> None:
        team_departments = {team.id: team.department_id for team in self._teams}
        for user in self._users:
            user.department_ids = _unique(team_departments.get(team_id) for team_id in user.team_ids)

    def _rebuild_from_teams(self) -> None:
        users_by_id = {user.id: user for user in self._users}
        for team in self._teams:
            if team.leader_id and team.leader_id not in team.member_ids:
                team.member_ids.append(team.leader_id)
            team.member_ids = [m for m in _unique(team.member_ids) if m in users_by_id]
        for user in self._users:
            user.team_ids = [t.id for t in self._teams if user.id in t.member_ids]
            user.leader_of_team_ids = [t.id for t in self._teams if t.leader_id == user.id]
            if user.leader_of_team_ids:
                user.is_leader = True

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def add_user(self, data: Payload) -> User:
        """
        Create a user and add it to the member (and leader) lists of its teams.

        Directors ignore the selected teams and join the administrative
        Diretoria team instead.
        """
        payload = _coerce(data, UserCreate)

        with self._mutation():
            self._check_email_free(payload.email)
            team_ids = [] if payload.is_director else _unique(payload.team_ids)
            teams = [self._require_team(team_id) for team_id in team_ids]
            led_teams = [self._require_team(team_id) for team_id in _unique(payload.leader_of_team_ids)]
            if payload.reports_to:
                self._check_superior(None, payload.reports_to)

            user = User(
                id=self._id_factory("user"),
                created_at=self._clock(),
                **payload.model_dump(exclude={"password", "team_ids", "leader_of_team_ids"})
            )
            self._users.append(user)

            for team in teams:
                self._add_member(team, user)
            if user.is_director:
                self._join_director_team(user)
            for team in led_teams:
                self._set_leader(team, user)

        self.notifier.success("User registered successfully!", data={"user_id": user.id})
        return user.model_copy(deep=True)

    def update_user(self, user_id: str, data: Payload) -> User:
        """
        Merge fields into a user.

        Changing ``team_ids`` re-synchronises team member lists (a user cannot
        leave a team it leads); changing ``reports_to`` is checked for cycles.
        Leadership is changed through ``update_team``.
        """
        updates = _coerce(data, UserUpdate).model_dump(exclude_unset=True)

        with self._mutation():
            user = self._require_user(user_id)
            new_team_ids = updates.pop("team_ids", None)

            if updates.get("email"):
                self._check_email_free(updates["email"], exclude_id=user_id)
            if updates.get("reports_to"):
                self._check_superior(user_id, updates["reports_to"])

            for field, value in updates.items():
                setattr(user, field, value)
            if user.is_director:
                user.is_leader = True
            if user.leader_of_team_ids and not user.is_leader:
                raise InvariantError("A user who leads a team must stay flagged as leader.")

            if new_team_ids is not None:
                self._sync_user_teams(user, _unique(new_team_ids))
            user.updated_at = self._clock()

        self.notifier.success("User updated successfully!", data={"user_id": user_id})
        return user.model_copy(deep=True)

    def _sync_user_teams(self, user: User, team_ids: List[str]) -> None:
        wanted = [self._require_team(team_id) for team_id in team_ids]
        wanted_ids = {team.id for team in wanted}

        for team_id in list(user.team_ids):
            if team_id in wanted_ids:
                continue
            team = self._find_team(team_id)
            if team and team.leader_id == user.id:
                raise InvariantError(
                    f"Cannot remove the leader from team '{team.name}'. Transfer the leadership first."
                )
            if team:
                self._remove_member(team, user)

        for team in wanted:
            self._add_member(team, user)

    def delete_user(self, user_id: str) -> None:
        """Remove a user who leads no team and has no direct reports"""
        with self._mutation():
            user = self._require_user(user_id)
            if user.leader_of_team_ids:
                raise InvariantError("Cannot delete a team leader. Transfer the leadership first.")
            if any(other.reports_to == user_id for other in self._users):
                raise InvariantError("Cannot delete a user who has direct reports. Reassign them first.")

            for team in self._teams:
                if user_id in team.member_ids:
                    self._remove_member(team, user)
            self._pdis = [pdi for pdi in self._pdis if pdi.employee_id != user_id]
            self._users = [u for u in self._users if u.id != user_id]

        self.notifier.success("User removed successfully!", data={"user_id": user_id})

    def link_hierarchy(self, user_id: str, superior_id: str) -> User:
        """Make superior_id the user's reports-to reference"""
        with self._mutation():
            user = self._require_user(user_id)
            self._check_superior(user_id, superior_id)
            user.reports_to = superior_id
            user.updated_at = self._clock()

        self.notifier.success("Hierarchy updated successfully!", data={"user_id": user_id})
        return user.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def add_team(self, data: Payload) -> Team:
        """Create a team; its leader is always one of its members"""
        payload = _coerce(data, TeamCreate)

        with self._mutation():
            self._require_department(payload.department_id)
            self._check_team_name_free(payload.name)
            leader = self._require_user(payload.leader_id)
            members = [self._require_user(member_id) for member_id in _unique(payload.member_ids)]
            # Ensure leader is included in members
            if leader.id not in {member.id for member in members}:
                members.append(leader)

            team = Team(
                id=self._id_factory("team"),
                name=payload.name,
                department_id=payload.department_id,
                leader_id=leader.id,
                description=payload.description,
                created_at=self._clock(),
            )
            self._teams.append(team)

            for member in members:
                self._add_member(team, member)
            self._set_leader(team, leader)

        self.notifier.success("Team created successfully!", data={"team_id": team.id})
        return team.model_copy(deep=True)

    def update_team(self, team_id: str, data: Payload) -> Team:
        """Merge fields into a team, re-synchronising members and leadership"""
        updates = _coerce(data, TeamUpdate).model_dump(exclude_unset=True)

        with self._mutation():
            team = self._require_team(team_id)

            if updates.get("name"):
                self._check_team_name_free(updates["name"], exclude_id=team_id)
                team.name = updates["name"]
            if updates.get("department_id"):
                self._require_department(updates["department_id"])
                team.department_id = updates["department_id"]
            if "description" in updates:
                team.description = updates["description"]

            leader = self._require_user(updates.get("leader_id") or team.leader_id)

            if updates.get("member_ids") is not None:
                wanted = [self._require_user(member_id) for member_id in _unique(updates["member_ids"])]
                if leader.id not in {member.id for member in wanted}:
                    wanted.append(leader)
                wanted_ids = {member.id for member in wanted}
                for member_id in list(team.member_ids):
                    if member_id not in wanted_ids:
                        member = self._find_user(member_id)
                        if member:
                            self._remove_member(team, member)
                for member in wanted:
                    self._add_member(team, member)

            self._set_leader(team, leader)
            team.updated_at = self._clock()

        self.notifier.success("Team updated successfully!", data={"team_id": team_id})
        return team.model_copy(deep=True)

    def add_team_member(self, team_id: str, user_id: str) -> Team:
        with self._mutation():
            team = self._require_team(team_id)
            self._add_member(team, self._require_user(user_id))
            team.updated_at = self._clock()

        self.notifier.success("Member added to team!", data={"team_id": team_id, "user_id": user_id})
        return team.model_copy(deep=True)

    def remove_team_member(self, team_id: str, user_id: str) -> Team:
        with self._mutation():
            team = self._require_team(team_id)
            user = self._require_user(user_id)
            if team.leader_id == user_id:
                raise InvariantError(
                    f"Cannot remove the leader from team '{team.name}'. Transfer the leadership first."
                )
            self._remove_member(team, user)
            team.updated_at = self._clock()

        self.notifier.success("Member removed from team!", data={"team_id": team_id, "user_id": user_id})
        return team.model_copy(deep=True)

    def delete_team(self, team_id: str) -> None:
        """Remove a team and strip it from every user's team and leader-of lists"""
        with self._mutation():
            team = self._require_team(team_id)
            if team is self._find_director_team() and any(u.is_director for u in self._users):
                raise InvariantError(f"Cannot delete the {DIRECTOR_TEAM_NAME} team while directors exist.")
            for user in self._users:
                user.team_ids = [t for t in user.team_ids if t != team_id]
                user.leader_of_team_ids = [t for t in user.leader_of_team_ids if t != team_id]
            self._teams = [t for t in self._teams if t.id != team_id]

        self.notifier.success("Team removed successfully!", data={"team_id": team_id})

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    def add_department(self, data: Payload) -> Department:
        payload = _coerce(data, DepartmentCreate)

        with self._mutation():
            department = Department(
                id=self._id_factory("dept"),
                name=payload.name,
                description=payload.description,
                created_at=self._clock(),
            )
            self._departments.append(department)

        self.notifier.success("Department created successfully!", data={"department_id": department.id})
        return department.model_copy(deep=True)

    def update_department(self, department_id: str, data: Payload) -> Department:
        updates = _coerce(data, DepartmentUpdate).model_dump(exclude_unset=True)

        with self._mutation():
            department = self._require_department(department_id)
            for field, value in updates.items():
                setattr(department, field, value)
            department.updated_at = self._clock()

        self.notifier.success("Department updated successfully!", data={"department_id": department_id})
        return department.model_copy(deep=True)

    def delete_department(self, department_id: str) -> None:
        """Remove a department no team belongs to"""
        with self._mutation():
            self._require_department(department_id)
            if any(team.department_id == department_id for team in self._teams):
                raise InvariantError("Cannot delete a department that still has teams.")
            self._departments = [d for d in self._departments if d.id != department_id]

        self.notifier.success("Department removed successfully!", data={"department_id": department_id})

    # ------------------------------------------------------------------
    # Organizational competencies and PDIs
    # ------------------------------------------------------------------

    def list_competencies(self) -> List[OrganizationalCompetency]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._competencies]

    def get_competency(self, competency_id: str) -> Optional[OrganizationalCompetency]:
        with self._lock:
            competency = next((c for c in self._competencies if c.id == competency_id), None)
            return competency.model_copy(deep=True) if competency else None

    def _require_competency(self, competency_id: str) -> OrganizationalCompetency:
        competency = next((c for c in self._competencies if c.id == competency_id), None)
        if not competency:
            raise EntityNotFoundError("Competency", competency_id)
        return competency

    def add_competency(self, data: Payload) -> OrganizationalCompetency:
        payload = _coerce(data, CompetencyCreate)

        with self._mutation():
            competency = OrganizationalCompetency(
                id=self._id_factory("comp"),
                name=payload.name,
                description=payload.description,
                created_at=self._clock(),
            )
            self._competencies.append(competency)

        self.notifier.success("Competency created successfully!")
        return competency.model_copy(deep=True)

    def update_competency(self, competency_id: str, data: Payload) -> OrganizationalCompetency:
        updates = _coerce(data, CompetencyUpdate).model_dump(exclude_unset=True)

        with self._mutation():
            competency = self._require_competency(competency_id)
            for field, value in updates.items():
                setattr(competency, field, value)
            competency.updated_at = self._clock()

        self.notifier.success("Competency updated successfully!")
        return competency.model_copy(deep=True)

    def delete_competency(self, competency_id: str) -> None:
        with self._mutation():
            self._require_competency(competency_id)
            self._competencies = [c for c in self._competencies if c.id != competency_id]

        self.notifier.success("Competency removed successfully!")

    def get_pdi(self, user_id: str) -> Optional[PdiRecord]:
        with self._lock:
            pdi = next((p for p in self._pdis if p.employee_id == user_id), None)
            return pdi.model_copy(deep=True) if pdi else None

    def save_pdi(self, data: Payload) -> PdiRecord:
        """Create or replace the development plan of one employee"""
        payload = _coerce(data, PdiCreate)

        with self._mutation():
            self._require_user(payload.employee_id)
            now = self._clock()
            existing = next((p for p in self._pdis if p.employee_id == payload.employee_id), None)
            pdi = PdiRecord(
                id=existing.id if existing else self._id_factory("pdi"),
                created_at=existing.created_at if existing else now,
                updated_at=now,
                **payload.model_dump()
            )
            self._pdis = [p for p in self._pdis if p.employee_id != payload.employee_id] + [pdi]

        self.notifier.success("PDI saved successfully!", data={"employee_id": payload.employee_id})
        return pdi.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def users(self) -> List[User]:
        with self._lock:
            return [u.model_copy(deep=True) for u in self._users]

    @property
    def teams(self) -> List[Team]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._teams]

    @property
    def departments(self) -> List[Department]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._departments]

    def user_records(self) -> List[User]:
        """Live user records for read-only walks; callers must not mutate them"""
        with self._lock:
            return list(self._users)

    def find_user_record(self, user_id: str) -> Optional[User]:
        """Live record of one user; callers must not mutate it"""
        with self._lock:
            return self._find_user(user_id)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._find_user(user_id)
            return user.model_copy(deep=True) if user else None

    def get_team_by_id(self, team_id: str) -> Optional[Team]:
        with self._lock:
            team = self._find_team(team_id)
            return team.model_copy(deep=True) if team else None

    def get_department_by_id(self, department_id: str) -> Optional[Department]:
        with self._lock:
            department = self._find_department(department_id)
            return department.model_copy(deep=True) if department else None

    def get_users_by_team(self, team_id: str) -> List[User]:
        with self._lock:
            team = self._find_team(team_id)
            if not team:
                return []
            return [u.model_copy(deep=True) for u in self._users if u.id in team.member_ids]

    def get_users_by_department(self, department_id: str) -> List[User]:
        with self._lock:
            return [u.model_copy(deep=True) for u in self._users if department_id in u.department_ids]

    def get_teams_by_department(self, department_id: str) -> List[Team]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._teams if t.department_id == department_id]

    def get_teams_by_user(self, user_id: str) -> List[Team]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._teams if user_id in t.member_ids]

    def get_direct_reports(self, user_id: str) -> List[User]:
        with self._lock:
            return [u.model_copy(deep=True) for u in self._users if u.reports_to == user_id]

    def list_users(
        self,
        active: Optional[bool] = None,
        is_leader: Optional[bool] = None,
        is_director: Optional[bool] = None,
        is_leader_or_director: Optional[bool] = None,
        reports_to: Optional[str] = None
    ) -> List[User]:
        """Users matching every given filter"""
        with self._lock:
            users = self._users
            if active is not None:
                users = [u for u in users if u.active == active]
            if is_leader is not None:
                users = [u for u in users if u.is_leader == is_leader]
            if is_director is not None:
                users = [u for u in users if u.is_director == is_director]
            if is_leader_or_director is not None:
                users = [u for u in users if (u.is_leader or u.is_director) == is_leader_or_director]
            if reports_to is not None:
                users = [u for u in users if u.reports_to == reports_to]
            return [u.model_copy(deep=True) for u in users]

    def team_memberships(self) -> List[TeamMembership]:
        """Every (team, member) pair, in team order"""
        with self._lock:
            users_by_id = {user.id: user for user in self._users}
            return [
                TeamMembership(team_id=team.id, user=users_by_id[member_id].model_copy(deep=True))
                for team in self._teams
                for member_id in team.member_ids
                if member_id in users_by_id
            ]

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """JSON-ready copy of every collection"""
        with self._lock:
            return {
                key: [record.model_dump(mode="json") for record in records]
                for key, records in self._state().items()
            }

    def check_invariants(self) -> List[str]:
        """Describe every broken relationship invariant; an empty list means consistent"""
        violations = []
        with self._lock:
            users_by_id = {user.id: user for user in self._users}
            teams_by_id = {team.id: team for team in self._teams}
            department_ids = {department.id for department in self._departments}

            for team in self._teams:
                if team.leader_id not in team.member_ids:
                    violations.append(f"team {team.id}: leader {team.leader_id} is not a member")
                if team.department_id not in department_ids:
                    violations.append(f"team {team.id}: unknown department {team.department_id}")
                for member_id in team.member_ids:
                    member = users_by_id.get(member_id)
                    if not member:
                        violations.append(f"team {team.id}: unknown member {member_id}")
                    elif team.id not in member.team_ids:
                        violations.append(f"team {team.id}: member {member_id} does not list the team")
                leader = users_by_id.get(team.leader_id)
                if leader and team.id not in leader.leader_of_team_ids:
                    violations.append(f"team {team.id}: leader {leader.id} does not list the team as led")

            hierarchy = HierarchyManager(self)
            for user in self._users:
                for team_id in user.team_ids:
                    team = teams_by_id.get(team_id)
                    if not team or user.id not in team.member_ids:
                        violations.append(f"user {user.id}: listed team {team_id} does not list the user")
                for team_id in user.leader_of_team_ids:
                    team = teams_by_id.get(team_id)
                    if not team or team.leader_id != user.id:
                        violations.append(f"user {user.id}: listed led team {team_id} has another leader")
                expected = {teams_by_id[t].department_id for t in user.team_ids if t in teams_by_id}
                if set(user.department_ids) != expected:
                    violations.append(f"user {user.id}: department_ids out of sync with teams")
                if user.is_director and not user.is_leader:
                    violations.append(f"user {user.id}: director not flagged as leader")
                if user.reports_to and user.reports_to not in users_by_id:
                    violations.append(f"user {user.id}: reports to unknown user {user.reports_to}")
                if hierarchy.has_cycle(user.id):
                    violations.append(f"user {user.id}: reports-to chain forms a cycle")

        return violations
