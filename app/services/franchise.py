"""Franchise and store management with admin-scoped visibility."""

import logging
from collections import defaultdict

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.models import Franchise, Store, User, UserRole
from app.models.franchise import FRANCHISE_NAME_MAX_LEN, STORE_NAME_MAX_LEN
from app.schemas.auth import CurrentUser, Role
from app.schemas.franchise import (
    FranchiseAdmin,
    FranchiseListResponse,
    FranchiseView,
    StoreResponse,
    StoreView,
)

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _name_pattern(name_filter: str | None) -> str:
    """
    Translate a '*' wildcard filter into a LIKE pattern.

    '%' and '_' in the filter match themselves; only '*' is a wildcard.
    """
    raw = (name_filter or "*").strip() or "*"
    for ch in (LIKE_ESCAPE, "%", "_"):
        raw = raw.replace(ch, LIKE_ESCAPE + ch)
    return raw.replace("*", "%")


def _admins_by_franchise(db: Session, franchise_ids: list[int]) -> dict[int, list[FranchiseAdmin]]:
    """Franchise id -> admins, in grant order."""
    admins: dict[int, list[FranchiseAdmin]] = defaultdict(list)
    if not franchise_ids:
        return admins
    rows = (
        db.query(UserRole.object_id, User)
        .join(User, User.id == UserRole.user_id)
        .filter(
            UserRole.role == Role.FRANCHISE_ADMIN.value,
            UserRole.object_id.in_(franchise_ids),
        )
        .order_by(UserRole.id)
        .all()
    )
    for franchise_id, user in rows:
        admins[franchise_id].append(
            FranchiseAdmin(id=user.id, name=user.name, email=user.email)
        )
    return admins


def _franchise_view(
    franchise: Franchise,
    admins: list[FranchiseAdmin] | None,
) -> FranchiseView:
    return FranchiseView(
        id=franchise.id,
        name=franchise.name,
        admins=admins,
        stores=[StoreView(id=s.id, name=s.name) for s in franchise.stores],
    )


def list_franchises(
    db: Session,
    page: int,
    limit: int,
    name_filter: str | None,
    include_admins: bool = False,
) -> FranchiseListResponse:
    """
    Public, paginated franchise listing ordered by id.

    Fetches limit + 1 rows to decide whether another page exists.
    """
    query = (
        db.query(Franchise)
        .filter(Franchise.name.like(_name_pattern(name_filter), escape=LIKE_ESCAPE))
        .order_by(Franchise.id)
        .offset(page * limit)
        .limit(limit + 1)
    )
    rows = query.all()
    more = len(rows) > limit
    rows = rows[:limit]

    admins = _admins_by_franchise(db, [f.id for f in rows]) if include_admins else {}
    franchises = [
        _franchise_view(f, admins.get(f.id, []) if include_admins else None)
        for f in rows
    ]
    return FranchiseListResponse(franchises=franchises, more=more)


def list_user_franchises(
    db: Session,
    requester: CurrentUser,
    user_id: int,
) -> list[FranchiseView]:
    """
    Franchises administered by user_id.

    A global admin may look up anyone; other callers only themselves. A
    disallowed lookup returns an empty list, same as a user with no franchises.
    """
    if not (requester.is_admin or requester.id == user_id):
        return []
    franchise_ids = [
        object_id
        for (object_id,) in db.query(UserRole.object_id)
        .filter(
            UserRole.user_id == user_id,
            UserRole.role == Role.FRANCHISE_ADMIN.value,
        )
        .all()
    ]
    if not franchise_ids:
        return []
    franchises = (
        db.query(Franchise)
        .filter(Franchise.id.in_(franchise_ids))
        .order_by(Franchise.id)
        .all()
    )
    admins = _admins_by_franchise(db, [f.id for f in franchises])
    return [_franchise_view(f, admins.get(f.id, [])) for f in franchises]


def create_franchise(
    db: Session,
    requester: CurrentUser,
    name: str | None,
    admin_emails: list[str | None],
) -> FranchiseView:
    """Create a franchise and grant franchise_admin on it to each listed user. Global admin only."""
    if not requester.is_admin:
        raise ForbiddenError("unable to create a franchise")
    name = (name or "").strip()
    if not name:
        raise ValidationError("franchise name is required")
    if len(name) > FRANCHISE_NAME_MAX_LEN:
        raise ValidationError(
            f"franchise name must be at most {FRANCHISE_NAME_MAX_LEN} characters"
        )

    admin_users: list[User] = []
    seen: set[int] = set()
    for email in admin_emails:
        email = (email or "").strip()
        user = db.query(User).filter(User.email == email).first() if email else None
        if user is None:
            raise ValidationError(f"unknown user for franchise admin email: {email}")
        if user.id not in seen:
            seen.add(user.id)
            admin_users.append(user)

    franchise = Franchise(name=name)
    db.add(franchise)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("franchise name already exists") from e

    for user in admin_users:
        db.add(
            UserRole(
                user_id=user.id,
                role=Role.FRANCHISE_ADMIN.value,
                object_id=franchise.id,
            )
        )
    db.commit()
    db.refresh(franchise)

    logger.info(
        "Franchise created",
        extra={"franchise_id": franchise.id, "admin_count": len(admin_users)},
    )
    admins = [FranchiseAdmin(id=u.id, name=u.name, email=u.email) for u in admin_users]
    return _franchise_view(franchise, admins)


def delete_franchise(db: Session, requester: CurrentUser, franchise_id: int) -> None:
    """
    Delete a franchise, its stores and every grant scoped to them. Global admin only.

    Raises NotFoundError for an unknown id.
    """
    if not requester.is_admin:
        raise ForbiddenError("unable to delete a franchise")
    franchise = db.get(Franchise, franchise_id)
    if franchise is None:
        raise NotFoundError("franchise not found")

    store_ids = [s.id for s in franchise.stores]
    scoped = and_(
        UserRole.role == Role.FRANCHISE_ADMIN.value,
        UserRole.object_id == franchise_id,
    )
    if store_ids:
        scoped = or_(
            scoped,
            and_(
                UserRole.role == Role.STORE_ADMIN.value,
                UserRole.object_id.in_(store_ids),
            ),
        )
    db.query(UserRole).filter(scoped).delete(synchronize_session=False)
    db.delete(franchise)
    db.commit()
    logger.info(
        "Franchise deleted",
        extra={"franchise_id": franchise_id, "store_count": len(store_ids)},
    )


def can_manage_stores(requester: CurrentUser, franchise_id: int) -> bool:
    """Global admins and admins of this franchise manage its stores."""
    return requester.is_admin or requester.has_scoped_role(
        Role.FRANCHISE_ADMIN, franchise_id
    )


def create_store(
    db: Session,
    requester: CurrentUser,
    franchise_id: int,
    name: str | None,
) -> StoreResponse:
    if not can_manage_stores(requester, franchise_id):
        raise ForbiddenError("unable to create a store")
    if db.get(Franchise, franchise_id) is None:
        raise NotFoundError("franchise not found")
    name = (name or "").strip()
    if not name:
        raise ValidationError("store name is required")
    if len(name) > STORE_NAME_MAX_LEN:
        raise ValidationError(f"store name must be at most {STORE_NAME_MAX_LEN} characters")

    store = Store(franchise_id=franchise_id, name=name)
    db.add(store)
    db.commit()
    db.refresh(store)
    logger.info("Store created", extra={"franchise_id": franchise_id, "store_id": store.id})
    return StoreResponse(id=store.id, franchise_id=store.franchise_id, name=store.name)


def delete_store(
    db: Session,
    requester: CurrentUser,
    franchise_id: int,
    store_id: int,
) -> None:
    """Delete a store of this franchise along with its store_admin grants."""
    if not can_manage_stores(requester, franchise_id):
        raise ForbiddenError("unable to delete a store")
    store = (
        db.query(Store)
        .filter(Store.id == store_id, Store.franchise_id == franchise_id)
        .first()
    )
    if store is None:
        raise NotFoundError("store not found")

    db.query(UserRole).filter(
        UserRole.role == Role.STORE_ADMIN.value,
        UserRole.object_id == store_id,
    ).delete(synchronize_session=False)
    db.delete(store)
    db.commit()
    logger.info("Store deleted", extra={"franchise_id": franchise_id, "store_id": store_id})
