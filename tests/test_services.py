import pytest

from userapi import auth_service, services
from userapi.errors import InvalidCredentialsError, UserAlreadyExistsError
from userapi.models.user import User
from userapi.security import verify_password


def test_get_all_users_projects_away_password(db, make_user):
    make_user()
    make_user(name="Bob", email="bob@example.com")

    users = services.get_all_users(db)

    assert [u["email"] for u in users] == ["alice@example.com", "bob@example.com"]
    assert all("password" not in u for u in users)


def test_get_user_by_id_returns_none_when_absent(db):
    assert services.get_user_by_id(db, 999) is None


def test_update_user_applies_allowed_fields_and_hashes_password(db, make_user):
    user = make_user()

    updated = services.update_user(
        db, user.id, {"name": "Alicia", "password": "newpass99"}
    )

    assert updated["name"] == "Alicia"
    assert "password" not in updated
    stored = db.get(User, user.id)
    db.refresh(stored)
    assert stored.password != "newpass99"
    assert verify_password("newpass99", stored.password)


def test_update_user_ignores_fields_outside_allow_list(db, make_user):
    user = make_user()

    updated = services.update_user(db, user.id, {"name": "Alicia", "id": 500})

    assert updated["id"] == user.id
    assert services.get_user_by_id(db, 500) is None


def test_update_user_returns_none_when_absent(db):
    assert services.update_user(db, 404, {"name": "Nobody"}) is None


def test_update_user_rejects_duplicate_email(db, make_user):
    make_user()
    bob = make_user(name="Bob", email="bob@example.com")

    with pytest.raises(UserAlreadyExistsError):
        services.update_user(db, bob.id, {"email": "alice@example.com"})

    assert services.get_user_by_id(db, bob.id)["email"] == "bob@example.com"


def test_delete_user_returns_deleted_identity(db, make_user):
    user_id = make_user().id

    deleted = services.delete_user(db, user_id)

    assert deleted == {"id": user_id, "email": "alice@example.com"}
    assert services.get_user_by_id(db, user_id) is None
    assert services.delete_user(db, user_id) is None


def test_create_user_then_authenticate(db):
    created = auth_service.create_user(
        db, name="Carol", email="carol@example.com", password="hunter22"
    )
    assert created["role"] == "user"
    assert "password" not in created

    user = auth_service.authenticate_user(db, "carol@example.com", "hunter22")
    assert user["id"] == created["id"]


def test_create_user_rejects_duplicate_email(db, make_user):
    make_user()
    with pytest.raises(UserAlreadyExistsError):
        auth_service.create_user(
            db, name="Other", email="alice@example.com", password="hunter22"
        )


def test_authentication_failures_are_indistinguishable(db, make_user):
    make_user()

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        auth_service.authenticate_user(db, "alice@example.com", "wrong-one")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        auth_service.authenticate_user(db, "nobody@example.com", "secret123")

    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid email or password"
