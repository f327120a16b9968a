"""
FastAPI router: CRUD over /users.

Handlers are stateless; the registry comes from app.state via a dependency.
Validation and not-found outcomes are returned as JSON error responses,
never raised. A registry ConflictError becomes a 500 response here.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.convertors import Convertor, register_url_convertor

from user_registry.api_server.errors import error_response
from user_registry.core.exceptions import ConflictError, NotFoundError, ValidationError
from user_registry.registry import User, UserRegistry
from user_registry.registry.validation import normalize, validate_user_input
from user_registry.registry_logging import get_logger

logger = get_logger(__name__)


class SignedIntConvertor(Convertor[int]):
    """Path segment matching an optionally negative integer id."""

    regex = "-?[0-9]+"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(int(value))


# Must be registered before the routes below compile their paths
register_url_convertor("signed_int", SignedIntConvertor())

router = APIRouter(prefix="/users", tags=["users"])

MSG_NOT_FOUND = "User not found."
MSG_CREATE_FAILED = "Could not create user."
MSG_UPDATE_FAILED = "Update failed."


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class UserInput(BaseModel):
    """POST/PUT /users body. Required-field checks happen in the handler."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(None, description="Login name; trimmed")
    email: str | None = Field(None, description="Email address; trimmed and lowercased")
    full_name: str | None = Field(None, alias="fullName", description="Optional display name")


class UserResponse(BaseModel):
    """User record as returned by the API (camelCase keys)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str | None = Field(None, serialization_alias="fullName")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime | None = Field(None, serialization_alias="updatedAt")


def _user_json(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json", by_alias=True)


def get_registry(request: Request) -> UserRegistry:
    """Dependency: the app-scoped registry."""
    return request.app.state.registry


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@router.post("", status_code=201, response_model=UserResponse)
def create_user(body: UserInput, registry: UserRegistry = Depends(get_registry)) -> Response:
    """Create a user. 201 with Location header; 400 on validation failure."""
    problem = validate_user_input(body.username, body.email)
    if problem:
        return error_response(ValidationError(problem))

    candidate = normalize(body.username, body.email, body.full_name)
    try:
        user = registry.create(candidate)
    except ConflictError:
        return error_response(ConflictError(MSG_CREATE_FAILED))

    logger.info("user_created", user_id=user.id)
    return JSONResponse(
        status_code=201,
        content=_user_json(user),
        headers={"Location": f"/users/{user.id}"},
    )


@router.get("", response_model=list[UserResponse])
def list_users(registry: UserRegistry = Depends(get_registry)) -> Response:
    """Return all users (order not guaranteed)."""
    return JSONResponse(content=[_user_json(u) for u in registry.list_all()])


@router.get("/{user_id:signed_int}", response_model=UserResponse)
def get_user(user_id: int, registry: UserRegistry = Depends(get_registry)) -> Response:
    user = registry.get(user_id)
    if user is None:
        return error_response(NotFoundError(MSG_NOT_FOUND))
    return JSONResponse(content=_user_json(user))


@router.put("/{user_id:signed_int}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserInput,
    registry: UserRegistry = Depends(get_registry),
) -> Response:
    """
    Replace a user wholesale. id and createdAt are kept; updatedAt is set.

    400 on validation failure (checked before existence), 404 if absent,
    500 if the record was deleted or replaced while the update was in flight.
    """
    problem = validate_user_input(body.username, body.email)
    if problem:
        return error_response(ValidationError(problem))

    candidate = normalize(body.username, body.email, body.full_name)
    try:
        user = registry.update(user_id, candidate)
    except ConflictError:
        return error_response(ConflictError(MSG_UPDATE_FAILED))
    if user is None:
        return error_response(NotFoundError(MSG_NOT_FOUND))

    logger.info("user_updated", user_id=user.id)
    return JSONResponse(content=_user_json(user))


@router.delete("/{user_id:signed_int}", status_code=204)
def delete_user(user_id: int, registry: UserRegistry = Depends(get_registry)) -> Response:
    if not registry.delete(user_id):
        return error_response(NotFoundError(MSG_NOT_FOUND))
    logger.info("user_deleted", user_id=user_id)
    return Response(status_code=204)
