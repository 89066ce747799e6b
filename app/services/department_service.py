# app/services/department_service.py
import logging
from typing import List, Optional

from app.exceptions import ApiError, ApiResponseError
from app.models.department import Department
from app.services.api_client import ApiClient, unwrap
from app.services.user_service import to_payload

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_all(self) -> List[Department]:
        try:
            data = unwrap(self.api.get("/departments"))
        except ApiError as e:
            logger.error(f"Error fetching departments: {e.message}")
            raise
        return [Department.model_validate(item) for item in data or []]

    def get_by_id(self, department_id: str) -> Optional[Department]:
        try:
            data = unwrap(self.api.get(f"/departments/{department_id}"))
        except ApiResponseError as e:
            if e.status == 404:
                return None
            logger.error(f"Error fetching department {department_id}: {e.message}")
            raise
        except ApiError as e:
            logger.error(f"Error fetching department {department_id}: {e.message}")
            raise
        return Department.model_validate(data) if data else None

    def create(self, data) -> Department:
        try:
            created = unwrap(self.api.post("/departments", to_payload(data)))
        except ApiError as e:
            logger.error(f"Error creating department: {e.message}")
            raise
        return Department.model_validate(created)

    def update(self, department_id: str, updates) -> Department:
        try:
            updated = unwrap(self.api.put(f"/departments/{department_id}", to_payload(updates, exclude_unset=True)))
        except ApiError as e:
            logger.error(f"Error updating department {department_id}: {e.message}")
            raise
        return Department.model_validate(updated)

    def delete(self, department_id: str) -> None:
        try:
            self.api.delete(f"/departments/{department_id}")
        except ApiError as e:
            logger.error(f"Error deleting department {department_id}: {e.message}")
            raise
