# app/services/pdi_service.py
import logging
from typing import Optional

from app.exceptions import ApiError, ApiResponseError
from app.models.pdi import PdiRecord
from app.services.api_client import ApiClient, unwrap
from app.services.user_service import to_payload

logger = logging.getLogger(__name__)


class PdiService:
    """Individual development plans, one per employee"""

    def __init__(self, api: ApiClient):
        self.api = api

    def get_pdi(self, user_id: str) -> Optional[PdiRecord]:
        try:
            data = unwrap(self.api.get(f"/pdi/{user_id}"))
        except ApiResponseError as e:
            # No plan saved yet for this employee
            if e.status == 404:
                return None
            logger.error(f"Error fetching PDI of {user_id}: {e.message}")
            raise
        except ApiError as e:
            logger.error(f"Error fetching PDI of {user_id}: {e.message}")
            raise
        return PdiRecord.model_validate(data) if data else None

    def save_pdi(self, data) -> PdiRecord:
        try:
            saved = unwrap(self.api.post("/pdi", to_payload(data)))
        except ApiError as e:
            logger.error(f"Error saving PDI: {e.message}")
            raise
        return PdiRecord.model_validate(saved)
