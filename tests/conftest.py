import pytest
from fastapi.testclient import TestClient

from app.api import create_app
from core.config import Settings
from core.db.base import Database
from core.db.users import UserStore


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send_reset_email(self, to_email, token):
        if self.fail:
            raise RuntimeError("smtp down")
        self.sent.append((to_email, token))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        email_user="sender@example.com",
        email_password="app-password",
        frontend_url="http://localhost:5173",
        rate_limit_max=10,
        rate_limit_window_seconds=900,
    )


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.open()
    yield db
    db.close()


@pytest.fixture
def users(database):
    return UserStore(database)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(settings, notifier):
    app = create_app(settings, notifier=notifier)
    with TestClient(app) as c:
        yield c


def register(client, username="alice", email="a@x.com", password="secret1"):
    return client.post("/register", json={"username": username, "email": email, "password": password})


def login(client, email="a@x.com", password="secret1"):
    return client.post("/login", json={"email": email, "password": password})
