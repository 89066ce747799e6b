# app/routers/errors.py
from fastapi import HTTPException, status

from app.exceptions import EntityNotFoundError, StoreError


def http_error(error: StoreError) -> HTTPException:
    """HTTP 404 for unknown references, 409 for rejected mutations"""
    if isinstance(error, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
