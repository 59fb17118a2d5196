"""
Create a user or add a role grant to one (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role] [--object-id N]
Examples:
  python -m app.scripts.create_user "Pizza Admin" admin@example.com your-secure-password admin
  python -m app.scripts.create_user "Pat" pat@example.com pw franchise_admin --object-id 3
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN, hash_password
from app.models import User, UserRole
from app.schemas.auth import GLOBAL_OBJECT_ID, Role

SCOPED_ROLES = (Role.FRANCHISE_ADMIN.value, Role.STORE_ADMIN.value)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a pizza service user or grant a role.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Email (unique; 1-255 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.DINER.value,
        choices=[r.value for r in Role],
    )
    parser.add_argument(
        "--object-id",
        type=int,
        default=GLOBAL_OBJECT_ID,
        help="Franchise or store id the grant is scoped to (franchise_admin/store_admin)",
    )
    args = parser.parse_args()

    name = args.name.strip()
    email = args.email.strip()
    if not name or len(name) > NAME_MAX_LEN or not email or len(email) > EMAIL_MAX_LEN:
        print("Invalid name or email length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1
    if args.role in SCOPED_ROLES and args.object_id == GLOBAL_OBJECT_ID:
        print(f"Role '{args.role}' requires --object-id.", file=sys.stderr)
        return 1
    object_id = args.object_id if args.role in SCOPED_ROLES else GLOBAL_OBJECT_ID

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(name=name, email=email, password_hash=hash_password(args.password))
            user.roles.append(UserRole(role=Role.DINER.value, object_id=GLOBAL_OBJECT_ID))
            db.add(user)
            created = True
        else:
            created = False
        if any(r.role == args.role and r.object_id == object_id for r in user.roles):
            if not created:
                print(f"User '{email}' already has role '{args.role}'.", file=sys.stderr)
                return 1
        else:
            user.roles.append(UserRole(role=args.role, object_id=object_id))
        db.commit()
        action = "Created user" if created else "Granted role to"
        print(f"{action} '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
