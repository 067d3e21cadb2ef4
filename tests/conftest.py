import os

# Settings are read at startup; tests never talk to a real MongoDB
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/cinesearch_test")
os.environ.setdefault("JWT_SECRET", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from db import get_db
from main import app
from omdb import UpstreamSearchError, get_omdb_client


def make_settings(**overrides) -> Settings:
    values = {
        "mongo_uri": "mongodb://localhost:27017/cinesearch_test",
        "jwt_secret": "test-secret",
        "password_scheme": "plaintext",
        "omdb_api_key": "test-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeOMDbClient:
    """Stands in for OMDbClient; records the names it was asked for."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.searched = []

    def search(self, name):
        self.searched.append(name)
        if self.error is not None:
            raise UpstreamSearchError(self.error)
        return self.payload


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient().get_database("cinesearch_test")


@pytest.fixture
def omdb_client():
    return FakeOMDbClient(payload={
        "Search": [{"Title": "Dune", "Year": "2021", "imdbID": "tt1160419"}],
        "totalResults": "1",
        "Response": "True",
    })


@pytest.fixture
def client(settings, mongo_db, omdb_client):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_db] = lambda: mongo_db
    app.dependency_overrides[get_omdb_client] = lambda: omdb_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup_and_signin(client, email="a@x.com", password="p", username="u"):
    client.post("/api/signup", json={"username": username, "email": email, "password": password})
    response = client.post("/api/signin", json={"email": email, "password": password})
    return response.json()["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
