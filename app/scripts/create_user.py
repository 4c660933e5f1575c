"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL NAME PASSWORD [role]
Example:
  python -m app.scripts.create_user admin@example.com "Admin User" your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import ConflictError, ValidationError
from app.schemas.user import UserCreate
from app.services.user_service import UserService
from app.services.validation import validate_input

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Inkpost user (e.g. an admin).")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("name", help="Display name (1-100 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        data = validate_input(
            UserCreate,
            {
                "email": args.email.strip(),
                "name": args.name.strip(),
                "password": args.password,
                "role": args.role,
            },
        )
    except ValidationError as e:
        for detail in e.details or []:
            print(f"{detail['field']}: {detail['message']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = UserService(db).create(data)
    except ConflictError:
        print(f"User '{data.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
