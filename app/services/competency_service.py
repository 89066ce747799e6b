# app/services/competency_service.py
import logging
from typing import List

from app.exceptions import ApiError
from app.models.competency import OrganizationalCompetency
from app.services.api_client import ApiClient, unwrap
from app.services.user_service import to_payload

logger = logging.getLogger(__name__)

BASE_PATH = "/competencies/organizational"


class CompetencyService:
    """Organizational competencies shared by every evaluation"""

    def __init__(self, api: ApiClient):
        self.api = api

    def get_all(self) -> List[OrganizationalCompetency]:
        try:
            data = unwrap(self.api.get(BASE_PATH))
        except ApiError as e:
            logger.error(f"Error fetching organizational competencies: {e.message}")
            raise
        return [OrganizationalCompetency.model_validate(item) for item in data or []]

    def create(self, data) -> OrganizationalCompetency:
        try:
            created = unwrap(self.api.post(BASE_PATH, to_payload(data)))
        except ApiError as e:
            logger.error(f"Error creating competency: {e.message}")
            raise
        return OrganizationalCompetency.model_validate(created)

    def update(self, competency_id: str, updates) -> OrganizationalCompetency:
        try:
            updated = unwrap(self.api.put(f"{BASE_PATH}/{competency_id}", to_payload(updates, exclude_unset=True)))
        except ApiError as e:
            logger.error(f"Error updating competency {competency_id}: {e.message}")
            raise
        return OrganizationalCompetency.model_validate(updated)

    def delete(self, competency_id: str) -> None:
        try:
            self.api.delete(f"{BASE_PATH}/{competency_id}")
        except ApiError as e:
            logger.error(f"Error deleting competency {competency_id}: {e.message}")
            raise
