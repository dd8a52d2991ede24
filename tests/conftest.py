import pytest
from fastapi.testclient import TestClient

from talent_site.api.server import create_app
from talent_site.config import Config
from talent_site.db import Database, init_db

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"
JWT_SECRET = "test-secret-0123456789abcdef0123456789"


def make_config(**overrides) -> Config:
    values = dict(
        ENVIRONMENT="test",
        DB_DSN=None,
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        AUTH_JWT_SECRET=JWT_SECRET,
        AUTH_COOKIE_NAME="admin_token",
        AUTH_COOKIE_SECURE=True,
    )
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def db_dsn(tmp_path):
    return f"sqlite:///{tmp_path / 'site.sqlite'}"


@pytest.fixture
def db(db_dsn):
    database = Database(db_dsn)
    init_db(database)
    yield database
    database.close()


@pytest.fixture
def client(db_dsn):
    # https base_url so the Secure session cookie is sent back.
    with TestClient(create_app(make_config(DB_DSN=db_dsn)), base_url="https://testserver") as c:
        yield c


@pytest.fixture
def demo_client():
    with TestClient(create_app(make_config(DB_DSN=None)), base_url="https://testserver") as c:
        yield c


@pytest.fixture
def admin_client(client):
    res = client.post("/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return client
