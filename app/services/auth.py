"""Auth service: registration, login and logout over the credential store and session registry."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthError, ValidationError
from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    create_access_token,
    hash_password,
    new_token_id,
    verify_password,
)
from app.models import User, UserRole
from app.schemas.auth import (
    GLOBAL_OBJECT_ID,
    AuthResponse,
    CurrentUser,
    Role,
    RoleAssignment,
    UserView,
)
from app.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

REGISTER_REQUIRED_MESSAGE = "name, email, and password are required"


def role_assignments(user: User) -> list[RoleAssignment]:
    """User's grants in grant order; unscoped grants carry no object_id."""
    return [
        RoleAssignment(
            role=r.role,
            object_id=r.object_id if r.object_id != GLOBAL_OBJECT_ID else None,
        )
        for r in user.roles
    ]


def user_view(user: User) -> UserView:
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=role_assignments(user),
    )


def _issue_token(user: User, registry: SessionRegistry) -> str:
    """Sign a token carrying the user's current identity and register it."""
    view = user_view(user)
    claims = view.model_dump(by_alias=True, exclude_none=True)
    jti = new_token_id()
    token = create_access_token(claims, jti)
    registry.register(jti, user.id)
    return token


def register(
    db: Session,
    registry: SessionRegistry,
    name: str | None,
    email: str | None,
    password: str | None,
) -> AuthResponse:
    """
    Create a diner account and log it in.

    Raises ValidationError when a field is missing/empty or the email is taken.
    """
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email or not password:
        raise ValidationError(REGISTER_REQUIRED_MESSAGE)
    if len(name) > NAME_MAX_LEN or len(email) > EMAIL_MAX_LEN:
        raise ValidationError("name and email must be at most 255 characters")
    if len(password) > PASSWORD_MAX_LEN:
        raise ValidationError("password must be at most 128 characters")

    user = User(name=name, email=email, password_hash=hash_password(password))
    user.roles.append(UserRole(role=Role.DINER.value, object_id=GLOBAL_OBJECT_ID))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # unique index on users.email decides concurrent registrations
        db.rollback()
        raise ValidationError("email already registered") from e
    db.refresh(user)

    token = _issue_token(user, registry)
    logger.info("User registered", extra={"user_id": user.id})
    return AuthResponse(user=user_view(user), token=token)


def login(
    db: Session,
    registry: SessionRegistry,
    email: str | None,
    password: str | None,
) -> AuthResponse:
    """Verify credentials and issue a new token. Raises AuthError on any mismatch."""
    email = (email or "").strip()
    if not email or not password:
        raise AuthError("invalid credentials")
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"reason": "bad credentials"})
        raise AuthError("invalid credentials")
    token = _issue_token(user, registry)
    return AuthResponse(user=user_view(user), token=token)


def logout(registry: SessionRegistry, identity: CurrentUser) -> None:
    """Revoke the token the identity was resolved from. A token already revoked is unauthorized."""
    if not registry.revoke(identity.token_id):
        raise AuthError()


def identity_from_claims(payload: dict, token: str) -> CurrentUser:
    """Build the request identity from verified token claims."""
    return CurrentUser(
        id=payload["id"],
        name=payload["name"],
        email=payload["email"],
        roles=payload.get("roles") or [],
        token=token,
        token_id=payload["jti"],
    )
