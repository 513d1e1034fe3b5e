import os
import tempfile

# Must be set before any project module reads config
_TMP_DIR = tempfile.mkdtemp(prefix="todo-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("TOKEN_EXPIRE_MINUTES", None)
os.environ.pop("DB_ENCRYPTION_KEY", None)

import pytest

from database import Base, SessionLocal, engine, init_db
from dependencies import limiter


@pytest.fixture(autouse=True)
def fresh_db():
    """Every test starts from empty users and tasks tables."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    limiter.reset()
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
