# create_admin.py
#
# Create the first admin account, or reset an existing account's password
# and promote it to admin.
#
#   python create_admin.py admin
#   python create_admin.py admin --password "s3cret-pass"

import argparse
import getpass

from sqlmodel import Session

from inventory.core.auth import hash_password
from inventory.core.exceptions import ValidationError
from inventory.database import create_db_and_tables, engine
from inventory.repositories.user_repo import UserRepository
from inventory.schemas.user import validate_user


def main():
    parser = argparse.ArgumentParser(description="Create or reset an admin account.")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--full-name", default="Administrator")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    try:
        payload = validate_user(
            {
                "username": args.username,
                "password": password,
                "role": "admin",
                "full_name": args.full_name,
            }
        )
    except ValidationError as exc:
        raise SystemExit(exc.message)

    create_db_and_tables()
    repo = UserRepository()

    with Session(engine) as session:
        existing = repo.find_by_username(session, payload.username)
        if existing is None:
            user_id = repo.create(session, payload, hash_password(payload.password))
            print(f"Admin '{payload.username}' created (id={user_id}).")
        else:
            repo.update(
                session,
                existing.id,
                {"password_hash": hash_password(payload.password), "role": "admin"},
            )
            print(f"Password reset for '{payload.username}'; role is now admin.")


if __name__ == "__main__":
    main()
