"""Tests for the account bootstrap script."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from pymongo.collection import Collection

from eclipse_api.core.errors import DuplicateEmailError
from eclipse_api.core.security import verify_password
from eclipse_api.scripts.create_user import create_user, main
from eclipse_api.services import CredentialStore


def test_create_user_hashes_password(store: CredentialStore, users_collection: Collection) -> None:
    user = create_user(
        store,
        email="  ops@example.com ",
        password="secret",
        first_name="Ops",
        last_name="Team",
    )

    document = users_collection.find_one({"email": "ops@example.com"})
    assert user.email == "ops@example.com"
    assert document["password"] != "secret"
    assert verify_password("secret", document["password"])
    assert document["agreeTerms"] is True


def test_create_user_rejects_duplicates(store: CredentialStore) -> None:
    create_user(store, email="ops@example.com", password="secret", first_name="Ops", last_name="Team")

    with pytest.raises(DuplicateEmailError):
        create_user(store, email="ops@example.com", password="other", first_name="Ops", last_name="Two")


def test_main_creates_user(users_collection: Collection, capsys: pytest.CaptureFixture[str]) -> None:
    connection = MagicMock()
    connection.users = users_collection

    with patch("eclipse_api.scripts.create_user.MongoConnection", return_value=connection):
        exit_code = main(
            [
                "--email",
                "ops@example.com",
                "--password",
                "secret",
                "--first-name",
                "Ops",
                "--last-name",
                "Team",
            ]
        )

    assert exit_code == 0
    assert "User created with id=" in capsys.readouterr().out
    assert users_collection.count_documents({"email": "ops@example.com"}) == 1
    connection.close.assert_called_once()


def test_main_prompts_for_every_field(users_collection: Collection) -> None:
    connection = MagicMock()
    connection.users = users_collection
    answers = iter(["ops@example.com", "Ops", "Team"])

    with (
        patch("eclipse_api.scripts.create_user.MongoConnection", return_value=connection),
        patch("builtins.input", side_effect=lambda prompt: next(answers)),
        patch("eclipse_api.scripts.create_user.getpass.getpass", return_value="secret"),
    ):
        exit_code = main(["--prompt"])

    assert exit_code == 0
    document = users_collection.find_one({"email": "ops@example.com"})
    assert document["firstName"] == "Ops"
    assert document["lastName"] == "Team"
    assert verify_password("secret", document["password"])


def test_main_rejects_blank_names_before_connecting() -> None:
    with (
        patch("eclipse_api.scripts.create_user.MongoConnection") as connection_cls,
        patch("builtins.input", return_value=""),
    ):
        with pytest.raises(SystemExit, match="First and last name must be provided"):
            main(["--email", "ops@example.com", "--password", "secret"])

    connection_cls.assert_not_called()
