import pytest

from app import create_app
from models import db
from sessions import InMemorySessionStore

ADMIN = {
    "username": "admin",
    "password": "s3cret-pass",
    "email": "admin@letterly.io",
    "fullName": "Site Admin",
}


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "SECRET_KEY": "test-secret-key",
            "LOG_LEVEL": "WARNING",
        },
        session_store=InMemorySessionStore(),
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = client.post("/api/auth/register", json=ADMIN)
    assert response.status_code == 201
    return client


@pytest.fixture
def anon_client(app):
    return app.test_client()
