# app/exceptions.py
from typing import Any, Optional


class ApiErrorResponse:
    """Status code and decoded body of a failed HTTP response"""

    def __init__(self, status: int, data: Any):
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"ApiErrorResponse(status={self.status}, data={self.data!r})"


class ApiError(Exception):
    """Base class for errors raised by the HTTP client"""

    request: bool = False
    response: Optional[ApiErrorResponse] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiRequestError(ApiError):
    """No response was received (connection refused, DNS failure, timeout...)"""

    request = True


class ApiResponseError(ApiError):
    """A response arrived with a non-2xx status or a ``success: false`` body"""

    def __init__(self, message: str, status: int, data: Any = None):
        super().__init__(message)
        self.response = ApiErrorResponse(status, data if data is not None else {"message": message})

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def data(self) -> Any:
        return self.response.data


class StoreError(Exception):
    """Base class for relational store errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvariantError(StoreError):
    """A mutation was rejected because it would break a relationship invariant"""


class EntityNotFoundError(StoreError):
    """A referenced user, team, department or record does not exist"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
