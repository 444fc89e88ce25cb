import pytest
from fastapi.testclient import TestClient

from csvninja.main import create_app
from csvninja.settings import Settings

SAMPLE_CSV = b"a,b\n1,2\n3,4\n5,6\n"


@pytest.fixture
def make_settings(tmp_path):
    """Build isolated settings; keyword arguments override the test defaults."""
    def _make(**overrides) -> Settings:
        values = {
            "environment": "test",
            "locale": "en",
            "log_level": "WARNING",
            "output_dir": tmp_path / "runs",
            "storage_mode": "memory",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def make_client(make_settings):
    clients = []

    def _make(**overrides) -> TestClient:
        client = TestClient(create_app(make_settings(**overrides)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def disk_client(make_client) -> TestClient:
    return make_client(storage_mode="disk")
