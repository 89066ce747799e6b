# app/services/registration_wizard.py
"""
Multi-step registration/edit wizard for users, teams and departments.

The wizard walks a draft through a fixed, linear list of steps. Advancing
runs only the current step's rules and stays put on failure; going back
never validates. ``submit`` is only available from ``review``: it
re-validates every step, then issues one create/update call through a
gateway (the demo-mode store or the hosted API).
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from app.exceptions import ApiError, StoreError
from app.schemas.department import DepartmentCreate, DepartmentUpdate
from app.schemas.drafts import DepartmentDraft, ProfileType, TeamDraft, UserDraft
from app.schemas.team import TeamCreate, TeamUpdate
from app.schemas.user import UserCreate, UserUpdate
from app.services.department_service import DepartmentService
from app.services.notification_service import NotificationService
from app.services.team_service import TeamService
from app.services.user_service import UserService
from app.utils.validators import MAX_AGE, MIN_AGE, add_years, calculate_age, is_valid_email, is_valid_phone

logger = logging.getLogger(__name__)

USER_STEPS = ["type", "basic", "personal", "role", "teams", "hierarchy", "review"]
TEAM_STEPS = ["basic", "members", "review"]
DEPARTMENT_STEPS = ["basic", "review"]

REVIEW_STEP = "review"


class SubmitResult(BaseModel):
    success: bool
    entity: Optional[Any] = None
    errors: Dict[str, str] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


class StoreGateway:
    """Submits wizard payloads to the in-memory relational store"""

    def __init__(self, store):
        self.store = store

    def email_exists(self, email: str) -> bool:
        return any(user.email.lower() == email.lower() for user in self.store.users)

    def create_user(self, payload: UserCreate):
        return self.store.add_user(payload)

    def update_user(self, user_id: str, payload: UserUpdate):
        return self.store.update_user(user_id, payload)

    def link_hierarchy(self, user_id: str, superior_id: str):
        return self.store.link_hierarchy(user_id, superior_id)

    def create_team(self, payload: TeamCreate):
        return self.store.add_team(payload)

    def update_team(self, team_id: str, payload: TeamUpdate):
        return self.store.update_team(team_id, payload)

    def create_department(self, payload: DepartmentCreate):
        return self.store.add_department(payload)

    def update_department(self, department_id: str, payload: DepartmentUpdate):
        return self.store.update_department(department_id, payload)


class ApiGateway:
    """Submits wizard payloads to the hosted REST API"""

    def __init__(self, api_client, cache=None):
        self.users = UserService(api_client)
        self.teams = TeamService(api_client)
        self.departments = DepartmentService(api_client)
        self.cache = cache

    def _changed(self, entity):
        if self.cache is not None:
            self.cache.invalidate()
        return entity

    def email_exists(self, email: str) -> bool:
        return self.users.check_email_exists(email)

    def create_user(self, payload: UserCreate):
        return self._changed(self.users.create_user_with_auth(payload))

    def update_user(self, user_id: str, payload: UserUpdate):
        return self._changed(self.users.update_user(user_id, payload))

    def link_hierarchy(self, user_id: str, superior_id: str):
        return self._changed(self.users.update_user(user_id, UserUpdate(reports_to=superior_id)))

    def create_team(self, payload: TeamCreate):
        return self._changed(self.teams.create(payload))

    def update_team(self, team_id: str, payload: TeamUpdate):
        return self._changed(self.teams.update(team_id, payload))

    def create_department(self, payload: DepartmentCreate):
        return self._changed(self.departments.create(payload))

    def update_department(self, department_id: str, payload: DepartmentUpdate):
        return self._changed(self.departments.update(department_id, payload))


class RegistrationWizard:
    def __init__(
        self,
        draft,
        gateway,
        editing_id: Optional[str] = None,
        notifier: Optional[NotificationService] = None,
        today: Optional[date] = None
    ):
        self.draft = draft
        self.gateway = gateway
        self.editing_id = editing_id
        self.notifier = notifier
        self.today = today or date.today()

        if isinstance(draft, UserDraft):
            self.steps = list(USER_STEPS)
        elif isinstance(draft, TeamDraft):
            self.steps = list(TEAM_STEPS)
        elif isinstance(draft, DepartmentDraft):
            self.steps = list(DEPARTMENT_STEPS)
        else:
            raise TypeError(f"Unsupported draft type: {type(draft).__name__}")

        self.step = self.steps[0]
        self.errors: Dict[str, str] = {}

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def step_index(self) -> int:
        return self.steps.index(self.step)

    def update(self, **fields) -> None:
        """Set draft fields and clear their pending error messages"""
        for field, value in fields.items():
            setattr(self.draft, field, value)
            self.errors.pop(field, None)

    def next_step(self) -> bool:
        """Advance when the current step validates; on failure stay and expose the errors"""
        if self.step == REVIEW_STEP:
            return False

        errors = self.validate_step(self.step)
        if errors:
            self.errors = errors
            return False

        self.errors = {}
        self.step = self.steps[self.step_index + 1]
        return True

    def previous_step(self) -> bool:
        if self.step_index == 0:
            return False
        self.errors = {}
        self.step = self.steps[self.step_index - 1]
        return True

    @property
    def can_submit(self) -> bool:
        return self.step == REVIEW_STEP and not any(self.validate_step(step) for step in self.steps)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_step(self, step: str) -> Dict[str, str]:
        """Field -> message for every rule of ``step`` the draft currently breaks"""
        if isinstance(self.draft, UserDraft):
            validators = {
                "basic": self._validate_user_basic,
                "personal": self._validate_personal,
                "role": self._validate_role,
                "teams": self._validate_teams,
                "hierarchy": self._validate_hierarchy,
            }
        elif isinstance(self.draft, TeamDraft):
            validators = {
                "basic": self._validate_team_basic,
                "members": self._validate_team_members,
            }
        else:
            validators = {"basic": self._validate_department_basic}

        validator = validators.get(step)
        return validator() if validator else {}

    def _validate_user_basic(self) -> Dict[str, str]:
        draft = self.draft
        errors = {}
        if not draft.name.strip():
            errors["name"] = "Name is required"
        if not draft.email.strip():
            errors["email"] = "Email is required"
        elif not is_valid_email(draft.email.strip()):
            errors["email"] = "Invalid email"
        if not self.is_editing and not draft.password:
            errors["password"] = "Password is required"
        return errors

    def _validate_personal(self) -> Dict[str, str]:
        draft = self.draft
        errors = {}
        if draft.phone and not is_valid_phone(draft.phone):
            errors["phone"] = "Invalid phone number, expected (XX) XXXXX-XXXX"

        if draft.birth_date:
            age = calculate_age(draft.birth_date, self.today)
            if age < MIN_AGE:
                errors["birth_date"] = f"Minimum age is {MIN_AGE} years"
            elif age > MAX_AGE:
                errors["birth_date"] = "Invalid birth date"

        if draft.join_date:
            if draft.join_date > self.today:
                errors["join_date"] = "Join date cannot be in the future"
            elif draft.birth_date and draft.join_date < add_years(draft.birth_date, MIN_AGE):
                errors["join_date"] = f"Invalid join date, the employee would be under {MIN_AGE}"
        return errors

    def _validate_role(self) -> Dict[str, str]:
        if not self.draft.position.strip():
            return {"position": "Position is required"}
        return {}

    def _validate_teams(self) -> Dict[str, str]:
        # Directors sit above teams
        if self.draft.profile_type == ProfileType.DIRECTOR:
            return {}
        if not self.draft.team_ids:
            return {"team_ids": "Select at least one team"}
        return {}

    def _validate_hierarchy(self) -> Dict[str, str]:
        draft = self.draft
        if draft.profile_type == ProfileType.REGULAR and not draft.reports_to:
            return {"reports_to": "Select who this user reports to"}
        if draft.reports_to and draft.reports_to == self.editing_id:
            return {"reports_to": "A user cannot report to themselves"}
        return {}

    def _validate_team_basic(self) -> Dict[str, str]:
        errors = {}
        if not self.draft.name.strip():
            errors["name"] = "Team name is required"
        if not self.draft.department_id:
            errors["department_id"] = "Department is required"
        return errors

    def _validate_team_members(self) -> Dict[str, str]:
        errors = {}
        if not self.draft.responsible_id:
            errors["responsible_id"] = "Team leader is required"
        if not self.draft.member_ids:
            errors["member_ids"] = "Select at least one member"
        return errors

    def _validate_department_basic(self) -> Dict[str, str]:
        if not self.draft.name.strip():
            return {"name": "Department name is required"}
        return {}

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def submit(self) -> SubmitResult:
        """
        Send the draft through the gateway.

        Validation failures return an unsuccessful result and move the wizard
        back to the first failing step. Gateway errors on the create/update
        call propagate. A failed hierarchy link after a successful create is
        reported as a warning; the created user is kept.
        """
        if self.step != REVIEW_STEP:
            return SubmitResult(success=False, errors={"step": "Complete every step before submitting"})

        for step in self.steps:
            errors = self.validate_step(step)
            if errors:
                self.step = step
                self.errors = errors
                return SubmitResult(success=False, errors=errors)

        if isinstance(self.draft, UserDraft):
            return self._submit_user()
        if isinstance(self.draft, TeamDraft):
            return self._submit_team()
        return self._submit_department()

    def _submit_user(self) -> SubmitResult:
        draft = self.draft
        email = draft.email.strip()

        if not self.is_editing and self.gateway.email_exists(email):
            self.step = "basic"
            self.errors = {"email": "Email already registered"}
            return SubmitResult(success=False, errors=self.errors)

        fields = {
            "name": draft.name.strip(),
            "email": email,
            "position": draft.position.strip(),
            "is_leader": draft.is_leader,
            "is_director": draft.is_director,
            "phone": draft.phone or None,
            "birth_date": draft.birth_date,
            "join_date": draft.join_date,
            "profile_image": draft.profile_image,
        }

        if self.is_editing:
            if not draft.is_director:
                fields["team_ids"] = draft.team_ids
            fields["reports_to"] = draft.reports_to or None
            user = self.gateway.update_user(self.editing_id, UserUpdate(**fields))
            logger.info(f"Wizard updated user {self.editing_id}")
            return SubmitResult(success=True, entity=user)

        superior_id = draft.reports_to or None
        link_after_create = superior_id is not None and not draft.is_director
        payload = UserCreate(
            **fields,
            password=draft.password,
            # Directors are placed in the Diretoria team on creation
            team_ids=[] if draft.is_director else draft.team_ids,
            reports_to=None if link_after_create else superior_id,
        )
        user = self.gateway.create_user(payload)
        logger.info(f"Wizard created user {user.id}")

        warnings = []
        if link_after_create:
            try:
                user = self.gateway.link_hierarchy(user.id, superior_id)
            except (StoreError, ApiError) as e:
                message = f"User created, but linking to the superior failed: {e.message}"
                logger.warning(message)
                warnings.append(message)
                if self.notifier:
                    self.notifier.warning(message, data={"user_id": user.id})

        return SubmitResult(success=True, entity=user, warnings=warnings)

    def _submit_team(self) -> SubmitResult:
        draft = self.draft
        fields = {
            "name": draft.name.strip(),
            "department_id": draft.department_id,
            "leader_id": draft.responsible_id,
            "member_ids": draft.member_ids,
            "description": draft.description or None,
        }
        if self.is_editing:
            team = self.gateway.update_team(self.editing_id, TeamUpdate(**fields))
        else:
            team = self.gateway.create_team(TeamCreate(**fields))
        logger.info(f"Wizard saved team {team.id}")
        return SubmitResult(success=True, entity=team)

    def _submit_department(self) -> SubmitResult:
        draft = self.draft
        fields = {"name": draft.name.strip(), "description": draft.description or None}
        if self.is_editing:
            department = self.gateway.update_department(self.editing_id, DepartmentUpdate(**fields))
        else:
            department = self.gateway.create_department(DepartmentCreate(**fields))
        logger.info(f"Wizard saved department {department.id}")
        return SubmitResult(success=True, entity=department)
