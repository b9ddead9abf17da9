"""Caro API server configuration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .. import __version__
from .fields import group, setting
from .loader import ConfigLoader

DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_PATH_ENV = "CARO_CONFIG"

API_SERVER_HOST_ENV = "API_SERVER_HOST"
API_SERVER_PORT_ENV = "API_SERVER_PORT"
RETHINKDB_ADDR_ENV = "RETHINKDB_ADDR"
RETHINKDB_PORT_ENV = "RETHINKDB_PORT"
RETHINKDB_DB_ENV = "RETHINKDB_DB"
RETHINKDB_AUTHKEY_ENV = "RETHINKDB_AUTHKEY"
FACEBOOK_APP_ID_ENV = "FACEBOOK_APP_ID"
FACEBOOK_APP_SECRET_ENV = "FACEBOOK_APP_SECRET"
FACEBOOK_CALLBACK_URL_ENV = "FACEBOOK_CALLBACK_URL"

# Masked when printing the config
SECRET_TAGS = frozenset({RETHINKDB_AUTHKEY_ENV, FACEBOOK_APP_SECRET_ENV})


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = setting(API_SERVER_HOST_ENV, "127.0.0.1")
    port: str = setting(API_SERVER_PORT_ENV, "8080")
    # Reported by /v1/health; never read from file or environment
    version: str = setting("-", __version__)


@dataclass
class RethinkConfig:
    """RethinkDB connection settings."""
    addr: str = setting(RETHINKDB_ADDR_ENV, "localhost")
    port: str = setting(RETHINKDB_PORT_ENV, "28015")
    db_name: str = setting(RETHINKDB_DB_ENV, "caro")
    auth_key: str = setting(RETHINKDB_AUTHKEY_ENV)

    @property
    def address(self) -> str:
        return f"{self.addr}:{self.port}"


@dataclass
class FacebookConfig:
    """Facebook login (OAuth) application settings.

    Leave all three empty to disable Facebook login.
    """
    app_id: str = setting(FACEBOOK_APP_ID_ENV)
    app_secret: str = setting(FACEBOOK_APP_SECRET_ENV)
    callback_url: str = setting(FACEBOOK_CALLBACK_URL_ENV)

    @property
    def enabled(self) -> bool:
        return bool(self.app_id and self.app_secret and self.callback_url)


@dataclass
class ServiceConfig:
    """Full service configuration.

    Example ``config.yaml``::

        server:
          API_SERVER_HOST: 0.0.0.0
          API_SERVER_PORT: "8080"
        rethinkdb:
          RETHINKDB_ADDR: 192.168.1.1
          RETHINKDB_DB: caro
        facebook:
          FACEBOOK_APP_ID: "1234"
          FACEBOOK_CALLBACK_URL: http://localhost:3000/login

    Any leaf can be overridden by the environment variable of the same
    name, e.g. ``RETHINKDB_PORT=28016``.
    """
    server: ServerConfig = group("server", ServerConfig)
    rethinkdb: RethinkConfig = group("rethinkdb", RethinkConfig)
    facebook: FacebookConfig = group("facebook", FacebookConfig)

    @classmethod
    def load(
        cls,
        path: str | Path,
        logger: Optional[logging.Logger] = None,
    ) -> "ServiceConfig":
        """Load configuration from a YAML file plus environment overrides."""
        return ConfigLoader(logger=logger).from_file_and_env(cls(), path)

    @classmethod
    def from_env(cls, logger: Optional[logging.Logger] = None) -> "ServiceConfig":
        """Load from the file named by ``CARO_CONFIG`` (default: ./config.yaml)."""
        path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
        return cls.load(path, logger=logger)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        for name, value in (
            (API_SERVER_PORT_ENV, self.server.port),
            (RETHINKDB_PORT_ENV, self.rethinkdb.port),
        ):
            if not _is_port(value):
                errors.append(f"{name} must be a port number (1-65535), got {value!r}")

        if not self.server.host:
            errors.append(f"{API_SERVER_HOST_ENV} is required")
        if not self.rethinkdb.addr:
            errors.append(f"{RETHINKDB_ADDR_ENV} is required")
        if not self.rethinkdb.db_name:
            errors.append(f"{RETHINKDB_DB_ENV} is required")

        # Facebook login is optional, but half a configuration is a mistake
        facebook = {
            FACEBOOK_APP_ID_ENV: self.facebook.app_id,
            FACEBOOK_APP_SECRET_ENV: self.facebook.app_secret,
            FACEBOOK_CALLBACK_URL_ENV: self.facebook.callback_url,
        }
        missing = [name for name, value in facebook.items() if not value]
        if missing and len(missing) < len(facebook):
            errors.append(
                f"Facebook login is partially configured; missing {', '.join(missing)}"
            )

        return errors


def _is_port(value: str) -> bool:
    if not (value.isascii() and value.isdigit()):
        return False
    return 1 <= int(value) <= 65535
