"""Investment operation endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.errors import ApiError
from services.operations import MissingFieldError, create_operation, list_operations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/operations", tags=["operations"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register an operation")
async def save_operation(request: Request) -> JSONResponse:
    """Validate the submitted operation and echo it with ``id`` and ``createdAt``."""

    try:
        payload: Any = await request.json()
        saved = create_operation(payload)
    except MissingFieldError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except Exception as exc:
        logger.exception("Error saving operation")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error saving operation") from exc
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=saved)


@router.get("", summary="List operations")
async def get_operations() -> List[Dict[str, Any]]:
    try:
        return list_operations()
    except Exception as exc:
        logger.exception("Error fetching operations")
        raise ApiError(500, "Error fetching operations") from exc


__all__ = ["router"]
