import os

# Configuration is read at import time, so the environment is set first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"
os.environ["OUTBOX_RETRY_DELAY_SECONDS"] = "0"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from spot2go.database import Base, create_db_engine, get_db  # noqa: E402
from spot2go.main import app  # noqa: E402
from spot2go.models import Place, PlaceStatus, Role, User  # noqa: E402
from spot2go.security_utils import hash_password_bcrypt, issue_token_for_user  # noqa: E402


class FakeStorage:
    def __init__(self):
        self.uploads = []

    def upload_bytes(self, content, content_type, extension):
        self.uploads.append((content, content_type))
        return f"https://images.test/spot2go_places/{len(self.uploads)}.{extension}"


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send_password_reset_email(self, to, name, token):
        self.sent.append(("password_reset", to, {"name": name, "token": token}))

    def send_password_changed_email(self, to, name):
        self.sent.append(("password_changed", to, {"name": name}))

    def send_booking_confirmation_email(self, to, name, place_name, ticket_id, **kwargs):
        self.sent.append(
            ("booking_confirmation", to, {"name": name, "place_name": place_name, "ticket_id": ticket_id, **kwargs})
        )

    def of_kind(self, kind):
        return [entry for entry in self.sent if entry[0] == kind]


class FakePushClient:
    def __init__(self):
        self.multicasts = []

    def send_multicast(self, tokens, title, body, data=None):
        self.multicasts.append({"tokens": list(tokens), "title": title, "body": body, "data": data})
        return len(tokens)


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def push():
    return FakePushClient()


@pytest.fixture
def client(session_factory, storage, mailer, push):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.storage = storage
    app.state.mailer = mailer
    app.state.push = push
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# DATA HELPERS
# ============================================================================


def create_user(db, email="user@example.com", role=Role.CUSTOMER, password="Secret123", name="Test User", **extra):
    user = User(
        name=name,
        email=email,
        password=hash_password_bcrypt(password) if password else None,
        role=role.value if isinstance(role, Role) else role,
        **extra,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token_for_user(user)}"}


def create_place(db, owner, name="Quiet Corner", status=PlaceStatus.APPROVED, **extra):
    place = Place(
        owner_id=owner.id,
        name=name,
        type="cafe",
        amenities=["wifi"],
        images=["https://images.test/a.jpg"],
        location={"address": "1 Main St", "lat": 43.65, "lng": -79.38},
        status=status.value if isinstance(status, PlaceStatus) else status,
        **extra,
    )
    db.add(place)
    db.commit()
    db.refresh(place)
    return place


@pytest.fixture
def customer(db):
    return create_user(db, email="customer@example.com", role=Role.CUSTOMER, name="Casey Customer")


@pytest.fixture
def owner(db):
    return create_user(db, email="owner@example.com", role=Role.OWNER, name="Olive Owner")


@pytest.fixture
def admin(db):
    return create_user(db, email="admin@example.com", role=Role.ADMIN, name="Ada Admin")
