import pytest

from todo_api.settings import get_settings

ENV_VARS = [
    "APP_ENV",
    "PERSISTENCE_BACKEND",
    "DATA_FILE",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "AWS_REGION",
    "SECRETS_MANAGER_SECRET_NAME",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
    "LOG_DIR",
    "HOST",
    "API_PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self):
        s = get_settings()
        assert s.environment == "development"
        assert s.is_production is False
        assert s.data_file == "./data/db.json"
        assert (s.db_host, s.db_port, s.db_name) == ("localhost", "5432", "todoapp")
        assert s.secret_name == "todoapp-secrets"
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "DEBUG"
        assert (s.host, s.port) == ("0.0.0.0", 3001)
        assert s.use_postgres is False

    def test_origins_and_port_parsing(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test ,")
        monkeypatch.setenv("API_PORT", "not-a-port")
        s = get_settings()
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.port == 3001


class TestBackendSelection:
    def test_production_selects_postgres(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        s = get_settings()
        assert s.use_postgres is True
        assert s.log_level == "INFO"

    def test_non_default_host_selects_postgres(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.internal")
        assert get_settings().use_postgres is True

    def test_explicit_localhost_keeps_file(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "localhost")
        assert get_settings().use_postgres is False

    def test_explicit_backend_wins(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "file")
        assert get_settings().use_postgres is False

        monkeypatch.setenv("APP_ENV", "development")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "POSTGRES")
        assert get_settings().use_postgres is True

    def test_unknown_backend_falls_back_to_auto(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "mongo")
        s = get_settings()
        assert s.persistence_backend is None
        assert s.use_postgres is False
