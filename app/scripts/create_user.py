"""
Create a user (e.g. first admin) without going through the API. Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.errors import DuplicateKeyError, ValidationError
from app.models import ROLES
from app.services.users import register_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Inkwell user.")
    parser.add_argument("username", help="Username (3-30 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = register_user(db, args.username, args.email, args.password, role=args.role)
    except ValidationError as e:
        for message in e.errors.values():
            print(message, file=sys.stderr)
        return 1
    except DuplicateKeyError as e:
        print(f"User not created: {e.message}.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
