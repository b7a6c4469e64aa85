import os
import tempfile

# Configuration is read at import time, so the environment comes first
_db_dir = tempfile.mkdtemp(prefix="legal-office-tests-")
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ALLOW_OPEN_REGISTRATION"] = "true"
os.environ["GLM_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["AI_MODE"] = "glm4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402

from legal_office.core.database import SessionLocal, create_tables, drop_tables  # noqa: E402
from legal_office.core.security import create_access_token, get_password_hash  # noqa: E402
from legal_office.main import app  # noqa: E402
from legal_office.models import Profile  # noqa: E402

DEFAULT_PASSWORD = "secret123"


def create_profile(db, email, role="lawyer", password=DEFAULT_PASSWORD, is_active=True, full_name=None):
    profile = Profile(
        email=email,
        role=role,
        full_name=full_name or email.split("@")[0],
        hashed_password=get_password_hash(password),
        is_active=is_active,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def bearer(profile):
    token = create_access_token({"sub": profile.id, "email": profile.email, "role": profile.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_database():
    drop_tables()
    create_tables()
    yield
    app.dependency_overrides = {}


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lawyer(db):
    return create_profile(db, "lawyer@example.com", full_name="Lawyer One")


@pytest.fixture
def other_lawyer(db):
    return create_profile(db, "other@example.com", full_name="Lawyer Two")


@pytest.fixture
def admin(db):
    return create_profile(db, "admin@example.com", role="admin", full_name="Admin")


@pytest.fixture
def lawyer_headers(lawyer):
    return bearer(lawyer)


@pytest.fixture
def other_headers(other_lawyer):
    return bearer(other_lawyer)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
