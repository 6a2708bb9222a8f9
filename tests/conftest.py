import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from course_checkout import database, models
from course_checkout.config import Settings, get_settings
from course_checkout.main import app, get_notifier

MERCHANT = "studynotion@okaxis"


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify_enrollment(self, user, course, transaction_id, payment_method):
        self.sent.append((user.id, course.id, transaction_id, payment_method))


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        upi_id=MERCHANT,
        merchant_id="BCR2DN4TXXXX",
        jwt_secret="test-secret",
    )


@pytest.fixture
def engine():
    engine = database.make_engine("sqlite://")
    database.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    session.add(models.Course(id="c1", course_name="Python Bootcamp", price=499))
    session.add(models.Course(id="c2", course_name="Data Structures", price=1299.5))
    session.add(models.User(id="u1", email="asha@example.com", first_name="Asha"))
    session.add(models.User(id="u2", email="ravi@example.com", first_name="Ravi"))
    session.commit()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, settings, notifier):
    def _get_db():
        yield db

    app.dependency_overrides[database.get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(settings):
    def _headers(user_id="u1", account_type="Student"):
        token = create_token(user_id, f"{user_id}@example.com", account_type, settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers


def create_token(user_id, email, account_type, settings):
    claims = {"id": user_id, "email": email, "accountType": account_type}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
