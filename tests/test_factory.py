"""Tests for building lexicon instances from configuration."""

import sys

import pytest

from cool_lexicon import (
    BackendType,
    ConfigError,
    ConnectionFailureError,
    LexiconConfig,
    OperationResult,
    get_instance,
)
from cool_lexicon.db import describe_target, libsql_url


@pytest.fixture
def sqlite_config(tmp_path):
    return LexiconConfig(type=BackendType.SQLITE, database=str(tmp_path / "words.db"))


class TestGetInstance:

    def test_none_config(self):
        with pytest.raises(ConfigError, match="nil"):
            get_instance(None)

    def test_setup_check_creates_schema(self, sqlite_config):
        with get_instance(sqlite_config, setup_check=True) as lx:
            lx.add(["देव"])
            assert lx.lookup(["देव"]) == {"देव": OperationResult(True)}

    def test_words_persist_between_instances(self, sqlite_config):
        with get_instance(sqlite_config, setup_check=True) as lx:
            lx.add(["नमस्ते", "नमस्कार"])
        with get_instance(sqlite_config) as lx:
            result = lx.get_all_words_starting_with(["नमस"])
        assert result["नमस"].value == ["नमस्कार", "नमस्ते"]

    def test_setup_check_is_repeatable(self, sqlite_config):
        get_instance(sqlite_config, setup_check=True).close()
        get_instance(sqlite_config, setup_check=True).close()

    def test_unreachable_sqlite_path(self, tmp_path):
        cfg = LexiconConfig(
            type=BackendType.SQLITE, database=str(tmp_path / "missing" / "words.db")
        )
        with pytest.raises(ConnectionFailureError):
            get_instance(cfg)

    def test_missing_mysql_driver(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pymysql", None)
        cfg = LexiconConfig(
            type=BackendType.MYSQL, host="localhost", database="lexicons",
            username="root", password="toor",
        )
        with pytest.raises(ConnectionFailureError, match="PyMySQL"):
            get_instance(cfg)

    def test_missing_libsql_driver(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "libsql_experimental", None)
        cfg = LexiconConfig(type=BackendType.LIBSQL, host="127.0.0.1")
        with pytest.raises(ConnectionFailureError, match="libsql-experimental"):
            get_instance(cfg)


class TestTargets:

    def test_mysql_target_masks_password(self):
        cfg = LexiconConfig(
            type=BackendType.MYSQL, host="db", port=3307, database="lexicons",
            username="root", password="toor",
        )
        assert describe_target(cfg) == "root:****@tcp(db:3307)/lexicons"

    def test_libsql_target(self):
        cfg = LexiconConfig(type=BackendType.LIBSQL, host="127.0.0.1")
        assert libsql_url(cfg) == "http://127.0.0.1:8080"
        assert describe_target(cfg) == "http://127.0.0.1:8080"

    def test_libsql_optional_token_is_masked(self):
        cfg = LexiconConfig(type=BackendType.LIBSQL, host="127.0.0.1", auth_token="secret")
        assert libsql_url(cfg) == "http://127.0.0.1:8080"
        assert describe_target(cfg) == "http://127.0.0.1:8080?authToken=****"

    def test_libsql_token_target_masks_token(self):
        cfg = LexiconConfig(
            type=BackendType.LIBSQL_TOKEN, host="words.turso.io", auth_token="secret",
        )
        assert libsql_url(cfg) == "libsql://words.turso.io"
        assert describe_target(cfg) == "libsql://words.turso.io?authToken=****"

    def test_host_with_scheme_is_kept(self):
        cfg = LexiconConfig(
            type=BackendType.LIBSQL_TOKEN, host="https://words.turso.io", auth_token="t",
        )
        assert libsql_url(cfg) == "https://words.turso.io"
