"""Register/login/logout routes and auth dependencies (get_current_user, get_optional_user)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthError
from app.core.security import decode_access_token
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
)
from app.services import auth as auth_service
from app.services.sessions import SessionRegistry

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_session_registry(
    db: Annotated[Session, Depends(get_db)],
) -> SessionRegistry:
    """Dependency: session registry bound to the request's DB session."""
    return SessionRegistry(db)


def _resolve_identity(
    credentials: HTTPAuthorizationCredentials | None,
    registry: SessionRegistry,
) -> CurrentUser:
    if credentials is None:
        raise AuthError()
    token = credentials.credentials
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise AuthError()
    if not registry.is_active(payload["jti"]):
        raise AuthError()
    try:
        return auth_service.identity_from_claims(payload, token)
    except (KeyError, TypeError, SchemaValidationError):
        raise AuthError()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> CurrentUser:
    """
    Dependency: require a valid, unrevoked "Bearer <token>" header and return
    the identity snapshot it carries. Raises AuthError (401) otherwise.
    """
    return _resolve_identity(credentials, registry)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> CurrentUser | None:
    """Dependency for public routes: the identity if a valid token was sent, else None."""
    if credentials is None:
        return None
    try:
        return _resolve_identity(credentials, registry)
    except AuthError:
        return None


@router.post("", response_model=AuthResponse, response_model_exclude_none=True)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> AuthResponse:
    """Register a diner; returns the user (no password) and a bearer token."""
    return auth_service.register(db, registry, body.name, body.email, body.password)


@router.put("", response_model=AuthResponse, response_model_exclude_none=True)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a new bearer token.
    Include it in the Authorization header as: Bearer <token>
    """
    return auth_service.login(db, registry, body.email, body.password)


@router.delete("", response_model=MessageResponse)
def logout(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> MessageResponse:
    """Revoke the presented token; later use of it is unauthorized."""
    auth_service.logout(registry, current_user)
    return MessageResponse(message="logout successful")
