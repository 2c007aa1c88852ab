import pytest

from company_registry.core.errors import CompanyConflictError
from company_registry.core.security import hash_password
from company_registry.models.user import User
from company_registry.services import company_store


@pytest.fixture
def owners(db):
    alice = User(name="alice", email="alice@example.com", password_hash=hash_password("x" * 8))
    bob = User(name="bob", email="bob@example.com", password_hash=hash_password("x" * 8))
    db.add_all([alice, bob])
    db.commit()
    return alice.id, bob.id


def test_create_assigns_id_and_timestamps(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)

    assert c.id
    assert c.user_id == alice
    assert c.created_at is not None
    assert c.updated_at is not None
    assert c.deleted_at is None


def test_insert_of_duplicate_inn_is_a_conflict(db, owners):
    alice, bob = owners
    company_store.create(db, "123456789012", "Acme", alice)

    with pytest.raises(CompanyConflictError):
        company_store.create(db, "123456789012", "Other", bob)

    # session is usable again after the rollback
    assert [c.title for c in company_store.find_active_by_owner(db, alice)] == ["Acme"]
    assert company_store.find_active_by_owner(db, bob) == []


def test_constraint_also_covers_soft_deleted_rows(db, owners):
    alice, bob = owners
    c = company_store.create(db, "123456789012", "Acme", alice)
    company_store.soft_delete(db, c)

    with pytest.raises(CompanyConflictError):
        company_store.create(db, "123456789012", "Other", bob)


def test_soft_deleted_company_still_found_by_inn(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)
    company_store.soft_delete(db, c)

    assert company_store.find_active_by_owner(db, alice) == []
    assert company_store.find_active_by_id(db, c.id) is None

    found = company_store.find_by_inn_including_deleted(db, "123456789012")
    assert found is not None
    assert found.id == c.id
    assert found.is_deleted


def test_soft_delete_sets_deleted_at_and_refreshes_updated_at(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)
    before = c.updated_at

    company_store.soft_delete(db, c)
    db.refresh(c)

    assert c.deleted_at is not None
    assert c.updated_at >= before
    assert c.title == "Acme"
    assert c.user_id == alice


def test_find_by_inn_returns_none_when_absent(db, owners):
    assert company_store.find_by_inn_including_deleted(db, "000000000000") is None


def test_restore_keeps_id_and_owner(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)
    company_store.soft_delete(db, c)
    before = c.updated_at

    restored = company_store.restore(db, c, "Acme Reborn")

    assert restored.id == c.id
    assert restored.user_id == alice
    assert restored.title == "Acme Reborn"
    assert restored.deleted_at is None
    assert restored.updated_at >= before
    assert [x.id for x in company_store.find_active_by_owner(db, alice)] == [c.id]


def test_restore_of_active_company_is_a_conflict(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)

    with pytest.raises(CompanyConflictError):
        company_store.restore(db, c, "Hijack")

    db.expire_all()
    assert company_store.find_active_by_id(db, c.id).title == "Acme"


def test_update_title_refreshes_updated_at(db, owners):
    alice, _ = owners
    c = company_store.create(db, "123456789012", "Acme", alice)
    before = c.updated_at

    updated = company_store.update_title(db, c, "Acme Ltd")

    assert updated.title == "Acme Ltd"
    assert updated.updated_at >= before
    assert updated.user_id == alice


def test_find_active_by_owner_filters_owner(db, owners):
    alice, bob = owners
    company_store.create(db, "111111111111", "A1", alice)
    company_store.create(db, "222222222222", "B1", bob)
    company_store.create(db, "333333333333", "A2", alice)

    assert [c.title for c in company_store.find_active_by_owner(db, alice)] == ["A1", "A2"]
    assert [c.title for c in company_store.find_active_by_owner(db, bob)] == ["B1"]
