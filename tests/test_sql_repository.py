"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from catalog_api.repositories.sql_repository import SQLRepository


def _product(**overrides):
    data = {"name": "Coffee Maker", "price": 120.0, "quantity": 75, "category": "Home & Kitchen"}
    data.update(overrides)
    return data


def test_user_lookup_and_uniqueness(db_env):
    repo = SQLRepository()
    user = repo.create_user("alice123", "alice@example.com", "hash")
    assert user.id
    assert user.email_verified is False

    assert repo.get_user(user.id).username == "alice123"
    assert repo.get_user_by_email("alice@example.com").id == user.id
    assert repo.get_user_by_username("alice123").id == user.id
    assert repo.find_user_by_identity("other@example.com", "alice123").id == user.id
    assert repo.find_user_by_identity("nobody@example.com", "nobody99") is None

    with pytest.raises(IntegrityError):
        repo.create_user("alice123", "second@example.com", "hash")


def test_verification_and_reset_tokens(db_env):
    repo = SQLRepository()
    user = repo.create_user("bobby123", "bob@example.com", "hash")
    expires = datetime.now(timezone.utc) + timedelta(hours=2)

    repo.set_verification_token(user.id, "verify-tok", expires)
    assert repo.get_user_by_verification_token("verify-tok").id == user.id
    repo.set_user_verified(user.id)
    refreshed = repo.get_user(user.id)
    assert refreshed.email_verified is True
    assert refreshed.verification_token is None
    assert repo.get_user_by_verification_token("verify-tok") is None

    repo.set_password_reset_token(user.id, "reset-tok", expires)
    assert repo.get_user_by_reset_token("reset-tok").id == user.id
    repo.clear_password_reset_token(user.id)
    assert repo.get_user_by_reset_token("reset-tok") is None


def test_product_crud_and_filters(db_env):
    repo = SQLRepository()
    owner = repo.create_user("carol123", "carol@example.com", "hash")
    first = repo.create_product(owner.id, **_product())
    repo.create_product(owner.id, **_product(name="Gaming Chair", category="Furniture"))

    assert [p.name for p in repo.list_products()] == ["Coffee Maker", "Gaming Chair"]
    assert [p.name for p in repo.list_products(category="Furniture")] == ["Gaming Chair"]
    assert repo.list_products(owner_id="missing") == []

    updated = repo.update_product(first.id, price=99.5, owner_id="someone-else")
    assert updated.price == 99.5
    assert updated.owner_id == owner.id
    assert repo.update_product("missing", price=1) is None

    repo.delete_product(first.id)
    assert repo.get_product(first.id) is None


def test_bulk_delete_only_touches_owner_rows(db_env):
    repo = SQLRepository()
    alice = repo.create_user("alice123", "alice@example.com", "hash")
    bob = repo.create_user("bobby123", "bob@example.com", "hash")
    a1 = repo.create_product(alice.id, **_product(name="A1"))
    a2 = repo.create_product(alice.id, **_product(name="A2"))
    b1 = repo.create_product(bob.id, **_product(name="B1"))

    assert repo.delete_products([a1.id, b1.id], alice.id) == 1
    assert repo.get_product(b1.id) is not None
    assert repo.delete_products_for_owner(alice.id) == 1
    assert repo.get_product(a2.id) is None

    repo.delete_user(bob.id)
    assert repo.get_user(bob.id) is None
    assert repo.get_product(b1.id) is None
