import pytest
from sqlalchemy.exc import SQLAlchemyError

from auth_utils import verify_token
from credential_store import CredentialStore
from errors import DuplicateEmailError, InternalError, InvalidCredentialsError, NotFoundError, ValidationError
from models import User
from task_store import TaskStore


@pytest.fixture()
def users(db):
    store = CredentialStore(db)
    alice = verify_token(store.register("alice@example.com", "pw-alice"))
    bob = verify_token(store.register("bob@example.com", "pw-bob"))
    return alice, bob


# --- CredentialStore ---

def test_register_stores_hash_not_password(db):
    CredentialStore(db).register("a@x.com", "p1", ip_address="127.0.0.1")
    user = db.query(User).filter(User.email == "a@x.com").one()
    assert user.hashed_password != "p1"
    assert user.ip_address == "127.0.0.1"

def test_register_duplicate_email(db):
    store = CredentialStore(db)
    store.register("a@x.com", "p1")
    with pytest.raises(DuplicateEmailError):
        store.register("a@x.com", "p2")

def test_email_is_case_sensitive(db):
    store = CredentialStore(db)
    store.register("a@x.com", "p1")
    store.register("A@x.com", "p1")
    assert db.query(User).count() == 2

@pytest.mark.parametrize("email,password", [(None, "p1"), ("a@x.com", None), ("", "p1"), ("a@x.com", "")])
def test_register_requires_email_and_password(db, email, password):
    with pytest.raises(ValidationError):
        CredentialStore(db).register(email, password)

def test_authenticate_returns_token_for_same_user(db):
    store = CredentialStore(db)
    user_id = verify_token(store.register("a@x.com", "p1"))
    assert verify_token(store.authenticate("a@x.com", "p1")) == user_id

@pytest.mark.parametrize("email,password", [("a@x.com", "wrong"), ("b@x.com", "p1")])
def test_authenticate_failures_look_identical(db, email, password):
    store = CredentialStore(db)
    store.register("a@x.com", "p1")
    with pytest.raises(InvalidCredentialsError) as info:
        store.authenticate(email, password)
    assert info.value.message == "Invalid credentials"


# --- TaskStore ---

def test_create_then_list(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")

    listed = store.list_by_owner(alice)
    assert [(t.id, t.taskname, t.status, t.tag, t.owner_id) for t in listed] == [
        (task.id, "buy milk", "pending", "personal", alice)
    ]

def test_list_is_empty_for_new_user(db, users):
    _, bob = users
    assert TaskStore(db).list_by_owner(bob) == []

def test_list_keeps_insertion_order(db, users):
    alice, _ = users
    store = TaskStore(db)
    names = ["one", "two", "three"]
    for name in names:
        store.create(alice, name, "pending", "family")
    assert [t.taskname for t in store.list_by_owner(alice)] == names

@pytest.mark.parametrize("taskname,status,tag", [
    (None, "pending", "personal"),
    ("x", None, "personal"),
    ("x", "pending", None),
    ("   ", "pending", "personal"),
    ("x", "started", "personal"),
    ("x", "pending", "work"),
])
def test_create_validation(db, users, taskname, status, tag):
    alice, _ = users
    store = TaskStore(db)
    with pytest.raises(ValidationError):
        store.create(alice, taskname, status, tag)
    assert store.list_by_owner(alice) == []

def test_update_is_partial(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")

    updated = store.update(alice, task.id, {"status": "done"})
    assert updated.status == "done"
    assert updated.taskname == "buy milk"
    assert updated.tag == "personal"

def test_update_ignores_none_values(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")
    with pytest.raises(ValidationError):
        store.update(alice, task.id, {"taskname": None, "status": None})

def test_update_rejects_invalid_values(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")
    with pytest.raises(ValidationError):
        store.update(alice, task.id, {"tag": "holiday"})
    with pytest.raises(ValidationError):
        store.update(alice, task.id, {"taskname": "   "})

def test_other_user_sees_not_found(db, users):
    alice, bob = users
    store = TaskStore(db)
    task = store.create(alice, "secret", "pending", "official")

    with pytest.raises(NotFoundError):
        store.get(bob, task.id)
    with pytest.raises(NotFoundError):
        store.update(bob, task.id, {"status": "done"})
    with pytest.raises(NotFoundError):
        store.delete(bob, task.id)
    assert store.list_by_owner(bob) == []
    assert store.get(alice, task.id).status == "pending"

def test_delete_is_permanent(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")
    store.delete(alice, task.id)

    assert store.list_by_owner(alice) == []
    with pytest.raises(NotFoundError):
        store.delete(alice, task.id)

def test_update_ignores_empty_values(db, users):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")

    updated = store.update(alice, task.id, {"taskname": "", "status": "done"})
    assert updated.taskname == "buy milk"
    assert updated.status == "done"

    with pytest.raises(ValidationError):
        store.update(alice, task.id, {"taskname": "", "tag": ""})


# --- Persistence failures ---

@pytest.fixture()
def failing_commit(db, monkeypatch):
    """Makes the next commits fail and records rollbacks."""
    rollbacks = []
    real_rollback = db.rollback

    def commit():
        raise SQLAlchemyError("database is locked")

    def rollback():
        rollbacks.append(True)
        real_rollback()

    monkeypatch.setattr(db, "commit", commit)
    monkeypatch.setattr(db, "rollback", rollback)
    return rollbacks

def test_create_commit_failure_rolls_back(db, users, failing_commit):
    alice, _ = users
    with pytest.raises(InternalError):
        TaskStore(db).create(alice, "buy milk", "pending", "personal")
    assert failing_commit == [True]

def test_delete_commit_failure_rolls_back(db, users, monkeypatch):
    alice, _ = users
    store = TaskStore(db)
    task = store.create(alice, "buy milk", "pending", "personal")

    def commit():
        raise SQLAlchemyError("gone")

    monkeypatch.setattr(db, "commit", commit)
    with pytest.raises(InternalError):
        store.delete(alice, task.id)

    monkeypatch.undo()
    assert store.get(alice, task.id).taskname == "buy milk"

def test_register_commit_failure_rolls_back(db, failing_commit):
    with pytest.raises(InternalError):
        CredentialStore(db).register("a@x.com", "p1")
    assert failing_commit == [True]

def test_register_race_on_unique_email(db, monkeypatch):
    store = CredentialStore(db)
    store.register("a@x.com", "p1")

    class _NoMatch:
        # Pretends the pre-check found nothing, as if a concurrent signup won
        def filter(self, *criteria):
            return self

        def first(self):
            return None

    monkeypatch.setattr(db, "query", lambda *entities: _NoMatch())
    with pytest.raises(DuplicateEmailError):
        store.register("a@x.com", "p2")
