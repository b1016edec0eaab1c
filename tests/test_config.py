# tests/test_config.py
import logging

import pytest

from club_admin.auth import Role
from club_admin.config import get_env_int, get_env_role, load_config_from_env

ENV_VARS = (
    "DATABASE_URL", "LOGGING_LEVEL", "LOGIN_PATH", "FALLBACK_ROLE", "TOKEN_EXPIRE_MINUTES",
    "SERVER_PORT", "GITHUB_STORAGE_OWNER", "GITHUB_STORAGE_REPO", "GITHUB_STORAGE_BRANCH",
    "GITHUB_STORAGE_TOKEN", "GITHUB_API_URL", "STORAGE_TIMEOUT_SECONDS",
)

@pytest.fixture
def clean_env(monkeypatch):
    """설정 관련 환경 변수를 모두 비웁니다. 테스트가 끝나면 원래 값으로 복원됩니다."""
    for name in ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch

class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = load_config_from_env()

        assert config.database_url == "sqlite:///club_admin.db"
        assert config.login_path == "/admin"
        assert config.fallback_role is Role.BASKAN
        assert config.token_expire_minutes == 60
        assert config.server_port == 8000
        assert config.storage_config.is_configured is False
        assert config.storage_config.branch == "main"

    def test_fallback_warning_is_logged(self, clean_env, caplog):
        with caplog.at_level(logging.WARNING, logger="club_admin.config"):
            load_config_from_env()

        assert "baskan" in caplog.text

    def test_empty_fallback_disables_it(self, clean_env):
        clean_env.setenv("FALLBACK_ROLE", "")

        config = load_config_from_env()

        assert config.fallback_role is None

    def test_storage_settings(self, clean_env):
        clean_env.setenv("GITHUB_STORAGE_OWNER", "kulup")
        clean_env.setenv("GITHUB_STORAGE_REPO", "dergi")
        clean_env.setenv("GITHUB_STORAGE_TOKEN", "ghp_test")
        clean_env.setenv("STORAGE_TIMEOUT_SECONDS", "5")

        config = load_config_from_env()

        assert config.storage_config.is_configured is True
        assert config.storage_config.timeout == 5

    @pytest.mark.parametrize("name, value", [
        ("SERVER_PORT", "70000"),
        ("SERVER_PORT", "abc"),
        ("TOKEN_EXPIRE_MINUTES", "0"),
        ("LOGIN_PATH", "admin"),
        ("FALLBACK_ROLE", "root"),
        ("GITHUB_API_URL", "ftp://example.org"),
    ])
    def test_invalid_values(self, clean_env, name, value):
        clean_env.setenv(name, value)

        with pytest.raises(ValueError):
            load_config_from_env()

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SERVER_PORT=9090\nFALLBACK_ROLE=teknik_koordinator\n", encoding="utf-8")

        config = load_config_from_env(env_file)

        assert config.server_port == 9090
        assert config.fallback_role is Role.TEKNIK_KOORDINATOR

class TestEnvHelpers:
    def test_get_env_int_default(self, clean_env):
        assert get_env_int("SERVER_PORT", 1234) == 1234

    def test_get_env_role(self, clean_env):
        clean_env.setenv("FALLBACK_ROLE", " dergi_ekip ")
        assert get_env_role("FALLBACK_ROLE", None) is Role.DERGI_EKIP
