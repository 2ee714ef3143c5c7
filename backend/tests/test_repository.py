"""Tests for the SQLAlchemy repositories."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from keeper.core.errors import LoginExists, NotFound, StorageError, UserNotFound
from keeper.db.repository import SecretRepository


def test_add_assigns_uuid_ids(secret_repository):
    first = secret_repository.add_data("u1", "text", "c1", "m1")
    second = secret_repository.add_data("u1", "text", "c2", "m2")
    assert first != second
    assert len(first) == 36


def test_get_by_owner_and_id_round_trips_columns(secret_repository):
    secret_id = secret_repository.add_data("u1", "card", "sealed", "visa")
    stored = secret_repository.get_by_owner_and_id("u1", secret_id, "card")
    assert (stored.id, stored.secret_type, stored.ciphertext, stored.meta) == (secret_id, "card", "sealed", "visa")


def test_conditional_update_and_delete(secret_repository):
    secret_id = secret_repository.add_data("u1", "text", "c1", "m1")

    secret_repository.update_data("u1", secret_id, "text", "c2", "m2")
    assert secret_repository.get_by_owner_and_id("u1", secret_id, "text").ciphertext == "c2"

    secret_repository.delete_by_id("u1", secret_id, "text")
    with pytest.raises(NotFound):
        secret_repository.delete_by_id("u1", secret_id, "text")
    with pytest.raises(NotFound):
        secret_repository.update_data("u1", secret_id, "text", "c3", "m3")
    assert secret_repository.get_all_by_owner("u1", "text") == []


def test_ping(secret_repository):
    secret_repository.ping()


def test_driver_errors_become_storage_errors():
    session_factory = MagicMock()
    session_factory.return_value.__enter__.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    repository = SecretRepository(session_factory)

    with pytest.raises(StorageError):
        repository.ping()
    with pytest.raises(StorageError):
        repository.get_all_by_owner("u1", "text")


def test_login_is_unique(user_repository):
    user_repository.create_user("alice", "hash")
    with pytest.raises(LoginExists):
        user_repository.create_user("alice", "other-hash")


def test_get_by_login(user_repository):
    owner_id = user_repository.create_user("alice", "hash")
    user = user_repository.get_by_login("alice")
    assert (user.id, user.login, user.password_hash) == (owner_id, "alice", "hash")
    with pytest.raises(UserNotFound):
        user_repository.get_by_login("bob")


def test_user_not_found_is_a_not_found(user_repository):
    with pytest.raises(NotFound):
        user_repository.get_by_login("ghost")
