# app/services/user_service.py
import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote
from pydantic import BaseModel

from app.exceptions import ApiError, ApiResponseError
from app.models.user import User
from app.services.api_client import ApiClient, unwrap

logger = logging.getLogger(__name__)


def to_payload(data: Union[BaseModel, Dict[str, Any]], exclude_unset: bool = False) -> Dict[str, Any]:
    """JSON-ready request body from a schema instance or a plain dict"""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_unset=exclude_unset)
    return data


def query_params(**filters) -> Dict[str, str]:
    """Query string values for the given filters, skipping the unset ones"""
    params = {}
    for key, value in filters.items():
        if value is None:
            continue
        params[key] = str(value).lower() if isinstance(value, bool) else str(value)
    return params


class UserService:
    """Users resource of the hosted API"""

    def __init__(self, api: ApiClient):
        self.api = api

    def get_users(
        self,
        active: Optional[bool] = None,
        is_leader: Optional[bool] = None,
        is_director: Optional[bool] = None,
        is_leader_or_director: Optional[bool] = None,
        reports_to: Optional[str] = None
    ) -> List[User]:
        params = query_params(
            active=active,
            is_leader=is_leader,
            is_director=is_director,
            is_leader_or_director=is_leader_or_director,
            reports_to=reports_to,
        )
        try:
            data = unwrap(self.api.get("/users", params=params))
        except ApiError as e:
            logger.error(f"Error fetching users: {e.message}")
            raise
        return [User.model_validate(item) for item in data or []]

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        try:
            data = unwrap(self.api.get(f"/users/{user_id}"))
        except ApiResponseError as e:
            if e.status == 404:
                return None
            logger.error(f"Error fetching user {user_id}: {e.message}")
            raise
        except ApiError as e:
            logger.error(f"Error fetching user {user_id}: {e.message}")
            raise
        return User.model_validate(data) if data else None

    def create_user(self, data) -> User:
        try:
            created = unwrap(self.api.post("/users", to_payload(data)))
        except ApiError as e:
            logger.error(f"Error creating user: {e.message}")
            raise
        return User.model_validate(created)

    def update_user(self, user_id: str, updates) -> User:
        try:
            updated = unwrap(self.api.put(f"/users/{user_id}", to_payload(updates, exclude_unset=True)))
        except ApiError as e:
            logger.error(f"Error updating user {user_id}: {e.message}")
            raise
        return User.model_validate(updated)

    def delete_user(self, user_id: str) -> None:
        try:
            self.api.delete(f"/users/{user_id}")
        except ApiError as e:
            logger.error(f"Error deleting user {user_id}: {e.message}")
            raise

    def get_subordinates(self, leader_id: str) -> List[User]:
        try:
            data = unwrap(self.api.get(f"/users/leader/{leader_id}/subordinates"))
        except ApiError as e:
            logger.error(f"Error fetching subordinates of {leader_id}: {e.message}")
            raise
        return [User.model_validate(item) for item in data or []]

    def create_user_with_auth(self, data) -> User:
        """Create the user together with its login credentials"""
        try:
            created = unwrap(self.api.post("/users/create-with-auth", to_payload(data)))
        except ApiError as e:
            logger.error(f"Error creating user with credentials: {e.message}")
            raise
        return User.model_validate(created)

    def check_email_exists(self, email: str) -> bool:
        try:
            data = unwrap(self.api.get(f"/users/check-email/{quote(email, safe='')}"))
        except ApiError as e:
            logger.error(f"Error checking email {email}: {e.message}")
            raise
        return bool(data.get("exists")) if isinstance(data, dict) else False

    def add_user_to_teams(self, user_id: str, team_ids: List[str]) -> None:
        try:
            self.api.post(f"/users/{user_id}/teams", {"teamIds": team_ids})
        except ApiError as e:
            logger.error(f"Error adding user {user_id} to teams: {e.message}")
            raise
