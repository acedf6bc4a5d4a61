import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from extensions import db

PASSWORD = "secreto123"


def guardian_payload(**overrides):
    payload = {
        "name": "María Pérez",
        "email": "maria@example.com",
        "phone": "+56 9 8765 4321",
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "studentName": "Tomás Pérez",
        "studentGrade": "2° Básico",
    }
    payload.update(overrides)
    return payload


def register(client, **overrides):
    return client.post('/api/register', json=guardian_payload(**overrides))


def login(client, email="maria@example.com", password=PASSWORD):
    return client.post('/api/login', json={"email": email, "password": password})


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test_secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "RATELIMIT_ENABLED": False,
        "SEED_DEMO_DATA": False,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def guardian_client(client):
    """Test client logged in as a freshly registered guardian."""
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client
