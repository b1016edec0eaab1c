"""Configuration management for the club admin backend.

Settings are loaded from environment variables (optionally from a .env file)
and validated once at start-up.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from dotenv import load_dotenv

from club_admin.auth import AuthorizationResolver, DEFAULT_ROLE_PERMISSIONS, Role, parse_role
from club_admin.storage import GitHubStorageConfig

LOGGER = logging.getLogger(__name__)

_PORT_UPPER_BOUND = 65536
_DEFAULT_PORT = 8000
_DEFAULT_TOKEN_EXPIRE_MINUTES = 60
_DEFAULT_STORAGE_TIMEOUT_SECONDS = 10


@dataclass
class AppConfig:
    """Holds application configuration loaded from environment variables."""

    database_url: str
    logging_level: Optional[str]
    login_path: str
    fallback_role: Optional[Role]
    token_expire_minutes: int
    server_port: int

    github_owner: Optional[str]
    github_repo: Optional[str]
    github_branch: str
    github_token: Optional[str]
    github_api_url: str
    storage_timeout: int

    def __post_init__(self) -> None:
        """Initialize derived configuration attributes."""
        self.resolver = AuthorizationResolver(DEFAULT_ROLE_PERMISSIONS)
        self.storage_config = GitHubStorageConfig(
            owner=self.github_owner,
            repo=self.github_repo,
            branch=self.github_branch,
            token=self.github_token,
            api_url=self.github_api_url,
            timeout=self.storage_timeout,
        )
        if self.fallback_role is not None:
            LOGGER.warning(
                "Authenticated users without a profile will receive the '%s' role",
                self.fallback_role.value,
            )


def configure_logging(app_config: AppConfig) -> None:
    """Configure logging based on the application configuration.

    :param app_config: The application configuration instance
    """
    if not app_config.logging_level:
        logging.basicConfig(level=logging.INFO)
        return

    numeric_level = getattr(logging, app_config.logging_level.upper(), None)
    if not isinstance(numeric_level, int):
        LOGGER.warning("Invalid log level: %s, using INFO", app_config.logging_level)
        numeric_level = logging.INFO
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def get_env_str(
    var_name: str,
    default: Optional[str],
    value_checker: Optional[Callable[[str], bool]] = None,
) -> str:
    """Get an environment variable as a string with optional constraints.

    :raises ValueError: If the variable is required and missing, or fails the check
    """
    value = os.getenv(var_name, default)
    if value is None:
        msg = f"Environment variable {var_name} is required"
        raise ValueError(msg)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_optional_str(var_name: str) -> Optional[str]:
    """Get an environment variable, treating unset and empty the same (None)."""
    value = os.getenv(var_name)
    return value or None


def get_env_int(
    var_name: str,
    default: int,
    value_checker: Optional[Callable[[int], bool]] = None,
) -> int:
    """Get an environment variable as an integer with optional constraints.

    :raises ValueError: If the value is not an integer or fails the check
    """
    value_str = os.getenv(var_name)
    if value_str is None or value_str == "":
        return default

    if not value_str.isnumeric():
        msg = f"Environment variable {var_name} must be an integer, got: {value_str}"
        raise ValueError(msg)

    value = int(value_str)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_role(var_name: str, default: Optional[Role]) -> Optional[Role]:
    """Get an environment variable as a Role. An empty value disables the role (None).

    :raises ValueError: If the value is not a known role
    """
    value_str = os.getenv(var_name)
    if value_str is None:
        return default
    if value_str.strip() == "":
        return None

    role = parse_role(value_str)
    if role is None:
        msg = f"Environment variable {var_name} must be a known role, got: {value_str}"
        raise ValueError(msg)
    return role


def load_config_from_env(env_file: Union[str, Path, None] = None) -> AppConfig:
    """Load application configuration from environment variables.

    :return: An AppConfig instance populated with environment variable values
    """
    if env_file:
        load_dotenv(dotenv_path=env_file)

    return AppConfig(
        database_url=get_env_str("DATABASE_URL", "sqlite:///club_admin.db"),
        logging_level=get_env_str("LOGGING_LEVEL", "INFO"),
        login_path=get_env_str(
            "LOGIN_PATH",
            "/admin",
            lambda path: path.startswith("/"),
        ),
        fallback_role=get_env_role("FALLBACK_ROLE", Role.BASKAN),
        token_expire_minutes=get_env_int(
            "TOKEN_EXPIRE_MINUTES",
            _DEFAULT_TOKEN_EXPIRE_MINUTES,
            lambda minutes: minutes > 0,
        ),
        server_port=get_env_int(
            "SERVER_PORT",
            _DEFAULT_PORT,
            lambda port: 0 < port < _PORT_UPPER_BOUND,
        ),
        github_owner=get_env_optional_str("GITHUB_STORAGE_OWNER"),
        github_repo=get_env_optional_str("GITHUB_STORAGE_REPO"),
        github_branch=get_env_str("GITHUB_STORAGE_BRANCH", "main", lambda branch: bool(branch)),
        github_token=get_env_optional_str("GITHUB_STORAGE_TOKEN"),
        github_api_url=get_env_str(
            "GITHUB_API_URL",
            "https://api.github.com",
            lambda url: url.startswith(("http://", "https://")),
        ),
        storage_timeout=get_env_int(
            "STORAGE_TIMEOUT_SECONDS",
            _DEFAULT_STORAGE_TIMEOUT_SECONDS,
            lambda seconds: seconds > 0,
        ),
    )
