import os
import tempfile

# Settings are read once, so the environment has to be in place before any app module loads
_tmpdir = tempfile.mkdtemp(prefix="pejuangbot-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STORE_PUBLIC_KEY"] = ""
os.environ.pop("AI_GATEWAY_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

import main
from config import get_settings
from db import Base, engine


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(main.app) as c:
        yield c


def register(client, email="siti@example.com", password="rahasia123"):
    resp = client.post("/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register(client)


@pytest.fixture
def store_public_key():
    settings = get_settings()
    previous = settings.store_public_key
    settings.store_public_key = "public-anon-key"
    yield settings.store_public_key
    settings.store_public_key = previous
