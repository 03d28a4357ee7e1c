from datetime import datetime

from fusion.models.user import NewUser, UpdateUser, User


def test_empty_update_has_no_changes():
    assert UpdateUser().changes() == {}


def test_update_lists_only_set_fields():
    update = UpdateUser(email="alice@example.com")
    assert update.changes() == {"email": "alice@example.com"}


def test_update_with_all_fields():
    password = "password"
    update = UpdateUser(username="alice", email="alice@example.com", password=password)
    assert update.changes() == {
        "username": "alice",
        "email": "alice@example.com",
        "password": password,
    }


def test_new_user_and_user_share_fields():
    password = "password"
    new_user = NewUser(username="alice", email="alice@example.com", password=password)
    now = datetime(2024, 5, 6, 7, 8, 9)
    user = User(
        id=1,
        username=new_user.username,
        email=new_user.email,
        password=new_user.password,
        created_at=now,
        updated_at=now,
    )
    assert user.email == "alice@example.com"
    assert user == User(1, "alice", "alice@example.com", password, now, now)