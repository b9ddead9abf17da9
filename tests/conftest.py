"""Pytest fixtures for caro-server tests."""

import textwrap

import pytest

from caroserver.config import ServiceConfig, describe
from caroserver.config.fields import FieldKind

CONFIG_ENV_VARS = ["CARO_CONFIG"]


def _leaf_tags(shape) -> list[str]:
    tags = []
    for f in describe(shape):
        if f.kind is FieldKind.GROUP:
            tags.extend(_leaf_tags(f.get(shape)))
        else:
            tags.append(f.tag)
    return tags


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    """Keep the developer's shell from leaking into config tests."""
    for name in CONFIG_ENV_VARS + _leaf_tags(ServiceConfig()):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_config(tmp_path):
    """Write a config file into tmp_path and return its path."""
    def _write(content: str, name: str = "config.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def service_config_file(write_config):
    """A complete, valid service config file."""
    return write_config("""\
        server:
          API_SERVER_HOST: 0.0.0.0
          API_SERVER_PORT: "9000"
        rethinkdb:
          RETHINKDB_ADDR: 192.168.1.1
          RETHINKDB_PORT: "28015"
          RETHINKDB_DB: caro_test
          RETHINKDB_AUTHKEY: rethink-secret
        facebook:
          FACEBOOK_APP_ID: "1234"
          FACEBOOK_APP_SECRET: fb-secret
          FACEBOOK_CALLBACK_URL: http://localhost:3000/login
        """)
