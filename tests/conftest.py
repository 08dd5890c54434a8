import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.settings import Settings


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        environment="test",
        persistence_backend="file",
        data_file=str(tmp_path / "data" / "db.json"),
        db_host="localhost",
        db_host_configured=False,
        db_port="5432",
        db_name="todoapp",
        db_user="todoapp_user",
        db_password="todoapp_password",
        aws_region=None,
        secret_name="todoapp-secrets",
        cors_allow_origins=["*"],
        log_level="WARNING",
        log_dir=None,
        host="127.0.0.1",
        port=3001,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    # Entering the context runs the lifespan, which builds the repository
    with TestClient(create_app(settings)) as c:
        yield c
