"""
User management API routes
All database access goes through the users service; failed results are
mapped to status codes here.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Path, Request

from database.query import ErrorKind
from models.user import UserEnvelope, UserListEnvelope, UserWriteRequest
from services.base_service import ServiceResult
from services.users_service import UsersService, get_users_service

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONNECTION: 503,
}

ERROR_MESSAGES = {
    409: "User conflicts with an existing record",
    400: "Invalid user identifier or field value",
    503: "Database unavailable",
}


def raise_for_result(result: ServiceResult, action: str):
    """Turn a failed service result into an HTTPException"""
    if result.success:
        return
    status_code = ERROR_STATUS_CODES.get(result.error_type, 500)
    logger.error(f"Failed to {action} user ({result.error_type}): {result.error}")
    raise HTTPException(
        status_code=status_code,
        detail=ERROR_MESSAGES.get(status_code, f"Failed to {action} user")
    )


def single_user_envelope(request: Request, result: ServiceResult, user_id: str) -> dict:
    """Envelope one affected row; no row is null unless strict not-found is on"""
    user = result.first
    if user is None and request.app.state.settings.strict_not_found:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return {"value": user}


@router.get("", response_model=UserListEnvelope, summary="List users")
async def list_users(service: UsersService = Depends(get_users_service)):
    """Return every user in the table"""
    result = await service.list_users()
    raise_for_result(result, "list")
    return {"value": result.data or []}


@router.post("", response_model=UserEnvelope, summary="Create a user")
async def create_user(
    request: UserWriteRequest,
    service: UsersService = Depends(get_users_service)
):
    """Insert a user and return the stored row"""
    result = await service.create_user(name=request.name, email=request.email)
    raise_for_result(result, "create")
    return {"value": result.first}


@router.put("/{user_id}", response_model=UserEnvelope, summary="Update a user")
async def update_user(
    http_request: Request,
    request: UserWriteRequest,
    user_id: str = Path(..., description="Identifier of the user to update"),
    service: UsersService = Depends(get_users_service)
):
    """
    Replace name and email of a user

    An unknown id yields `{"value": null}`, or 404 when STRICT_NOT_FOUND is enabled.
    """
    result = await service.update_user(user_id, name=request.name, email=request.email)
    raise_for_result(result, "update")
    return single_user_envelope(http_request, result, user_id)


@router.delete("/{user_id}", response_model=UserEnvelope, summary="Delete a user")
async def delete_user(
    http_request: Request,
    user_id: str = Path(..., description="Identifier of the user to delete"),
    service: UsersService = Depends(get_users_service)
):
    """
    Delete a user and return the removed row

    An unknown id yields `{"value": null}`, or 404 when STRICT_NOT_FOUND is enabled.
    """
    result = await service.delete_user(user_id)
    raise_for_result(result, "delete")
    return single_user_envelope(http_request, result, user_id)
