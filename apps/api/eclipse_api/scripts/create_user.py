"""Utility script for registering an account from the command line."""

from __future__ import annotations

import argparse
import getpass

from eclipse_api.core.config import get_settings
from eclipse_api.core.errors import DuplicateEmailError, StoreUnavailableError, ValidationError
from eclipse_api.db import MongoConnection
from eclipse_api.models.user import UserRecord
from eclipse_api.repositories.user import UserRepository
from eclipse_api.services.credentials import CredentialStore


def create_user(
    store: CredentialStore,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    company: str | None = None,
) -> UserRecord:
    """Register an account through the credential store."""

    return store.register(
        first_name=first_name,
        last_name=last_name,
        email=email.strip(),
        password=password,
        company=company,
        agree_terms=True,
    )


def _resolve_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an EclipseAI user account")
    parser.add_argument("--email", help="Email address for the account")
    parser.add_argument("--first-name", help="Given name")
    parser.add_argument("--last-name", help="Family name")
    parser.add_argument("--company", help="Company name (optional)")
    parser.add_argument(
        "--password",
        help="Password for the account (omit to securely prompt)",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Force interactive prompts for every account field except company",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _resolve_cli_args(argv)

    email = args.email
    password = args.password

    if args.prompt or not email:
        email = input("Email: ").strip()
    if not email:
        raise SystemExit("Email must be provided")

    first_name = args.first_name
    if args.prompt or not first_name:
        first_name = input("First name: ").strip()
    last_name = args.last_name
    if args.prompt or not last_name:
        last_name = input("Last name: ").strip()
    if not first_name or not last_name:
        raise SystemExit("First and last name must be provided")

    if args.prompt or password is None:
        password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must be provided")

    settings = get_settings()
    connection = MongoConnection(settings)
    try:
        store = CredentialStore(connection.users, settings=settings)
        UserRepository().ensure_indexes(connection.users)
        user = create_user(
            store,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            company=args.company,
        )
    except (ValidationError, DuplicateEmailError) as exc:
        raise SystemExit(exc.message) from exc
    except StoreUnavailableError as exc:
        raise SystemExit("Failed to reach MongoDB") from exc
    finally:
        connection.close()

    print(f"User created with id={user.id}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    raise SystemExit(main())
