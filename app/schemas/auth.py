"""Request/response schemas for auth endpoints and the authenticated identity."""

from enum import Enum

from pydantic import Field, PrivateAttr

from app.schemas.base import CamelModel


class Role(str, Enum):
    """Role names stored in user_roles.role."""

    DINER = "diner"
    FRANCHISE_ADMIN = "franchise_admin"
    STORE_ADMIN = "store_admin"
    ADMIN = "admin"


# object_id of an unscoped grant
GLOBAL_OBJECT_ID = 0


class RoleAssignment(CamelModel):
    """One role grant; object_id is omitted for unscoped grants."""

    role: str
    object_id: int | None = Field(default=None, description="Franchise or store id")


class RegisterRequest(CamelModel):
    """Registration payload. Presence is checked by the auth service (400, not 422)."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str | None = None
    password: str | None = None


class UserView(CamelModel):
    """User as returned to clients (never includes the password)."""

    id: int
    name: str
    email: str
    roles: list[RoleAssignment]


class AuthResponse(CamelModel):
    """Returned after register and login."""

    user: UserView
    token: str = Field(..., description="JWT bearer token")


class MessageResponse(CamelModel):
    message: str


class CurrentUser(CamelModel):
    """
    Authenticated identity (snapshot taken when the token was issued).

    Role membership is answered from sets built once per instance, so both
    is_role and has_scoped_role are O(1).
    """

    id: int
    name: str
    email: str
    roles: list[RoleAssignment]
    token: str = Field(default="", exclude=True)
    token_id: str = Field(default="", exclude=True)

    _role_names: set[str] = PrivateAttr(default_factory=set)
    _scoped_roles: set[tuple[str, int]] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: object) -> None:
        self._role_names = {r.role for r in self.roles}
        self._scoped_roles = {
            (r.role, r.object_id or GLOBAL_OBJECT_ID) for r in self.roles
        }

    def is_role(self, role: Role | str) -> bool:
        """True if any grant carries this role name, whatever its scope."""
        return _role_value(role) in self._role_names

    def has_scoped_role(self, role: Role | str, object_id: int) -> bool:
        """True if the user holds exactly (role, object_id)."""
        return (_role_value(role), object_id) in self._scoped_roles

    @property
    def is_admin(self) -> bool:
        return self.has_scoped_role(Role.ADMIN, GLOBAL_OBJECT_ID)


def _role_value(role: Role | str) -> str:
    return role.value if isinstance(role, Role) else role
