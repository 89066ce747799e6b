# app/services/team_service.py
import logging
from typing import List, Optional

from app.exceptions import ApiError, ApiResponseError
from app.models.team import Team, TeamMembership
from app.models.user import User
from app.services.api_client import ApiClient, unwrap
from app.services.user_service import to_payload

logger = logging.getLogger(__name__)


class TeamService:
    """Teams resource of the hosted API"""

    def __init__(self, api: ApiClient):
        self.api = api

    def get_all(self) -> List[Team]:
        try:
            data = unwrap(self.api.get("/teams"))
        except ApiError as e:
            logger.error(f"Error fetching teams: {e.message}")
            raise
        return [Team.model_validate(item) for item in data or []]

    def get_by_id(self, team_id: str) -> Optional[Team]:
        try:
            data = unwrap(self.api.get(f"/teams/{team_id}"))
        except ApiResponseError as e:
            if e.status == 404:
                return None
            logger.error(f"Error fetching team {team_id}: {e.message}")
            raise
        except ApiError as e:
            logger.error(f"Error fetching team {team_id}: {e.message}")
            raise
        return Team.model_validate(data) if data else None

    def create(self, data) -> Team:
        try:
            created = unwrap(self.api.post("/teams", to_payload(data)))
        except ApiError as e:
            logger.error(f"Error creating team: {e.message}")
            raise
        return Team.model_validate(created)

    def update(self, team_id: str, updates) -> Team:
        try:
            updated = unwrap(self.api.put(f"/teams/{team_id}", to_payload(updates, exclude_unset=True)))
        except ApiError as e:
            logger.error(f"Error updating team {team_id}: {e.message}")
            raise
        return Team.model_validate(updated)

    def delete(self, team_id: str) -> None:
        try:
            self.api.delete(f"/teams/{team_id}")
        except ApiError as e:
            logger.error(f"Error deleting team {team_id}: {e.message}")
            raise

    def get_members(self, team_id: str) -> List[User]:
        try:
            data = unwrap(self.api.get(f"/teams/{team_id}/members"))
        except ApiError as e:
            logger.error(f"Error fetching members of team {team_id}: {e.message}")
            raise
        return [User.model_validate(item) for item in data or []]

    def add_member(self, team_id: str, user_id: str) -> None:
        try:
            self.api.post(f"/teams/{team_id}/members", {"user_id": user_id})
        except ApiError as e:
            logger.error(f"Error adding {user_id} to team {team_id}: {e.message}")
            raise

    def remove_member(self, team_id: str, user_id: str) -> None:
        try:
            self.api.delete(f"/teams/{team_id}/members/{user_id}")
        except ApiError as e:
            logger.error(f"Error removing {user_id} from team {team_id}: {e.message}")
            raise

    def replace_members(self, team_id: str, user_ids: List[str]) -> None:
        try:
            self.api.put(f"/teams/{team_id}/members", {"user_ids": user_ids})
        except ApiError as e:
            logger.error(f"Error replacing members of team {team_id}: {e.message}")
            raise

    def get_user_teams(self, user_id: str) -> List[Team]:
        try:
            data = unwrap(self.api.get(f"/teams/user/{user_id}"))
        except ApiError as e:
            logger.error(f"Error fetching teams of user {user_id}: {e.message}")
            raise
        return [Team.model_validate(item) for item in data or []]

    def get_all_members(self) -> List[TeamMembership]:
        """Every (team, member) pair in one request"""
        try:
            data = unwrap(self.api.get("/teams/members/all"))
        except ApiError as e:
            logger.error(f"Error fetching team memberships: {e.message}")
            raise
        return [TeamMembership.model_validate(item) for item in data or []]
