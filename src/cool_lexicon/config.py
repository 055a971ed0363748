"""
Configuration loading and validation for cool-lexicon.

A config file is a JSON object (YAML is accepted as well)::

    {
        "type": "mysql",
        "host": "localhost",
        "port": 3306,
        "database": "lexicons",
        "username": "root",
        "password": "toor"
    }

Each backend type has its own credential form: username and password
for ``mysql``, an ``authToken`` for ``libsql-token``, an optional
``authToken`` for ``libsql``, and nothing for ``sqlite``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError
from .models import BackendType

DEFAULT_CONFIG_FILE = "cool-lexicon-cfg.json"

DEFAULT_PORTS: Dict[BackendType, int] = {
    BackendType.MYSQL: 3306,
    BackendType.LIBSQL: 8080,
}


@dataclass(frozen=True)
class LexiconConfig:
    """Validated connection settings for one word store."""
    type: BackendType
    host: str = ""
    port: Optional[int] = None
    database: str = ""
    username: str = ""
    password: str = ""
    auth_token: str = ""
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        _validate(self)

    @property
    def effective_port(self) -> Optional[int]:
        """Configured port, or the backend's default one."""
        if self.port is not None:
            return self.port
        return DEFAULT_PORTS.get(self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LexiconConfig":
        """Build a config from a parsed JSON object."""
        raw_type = data.get("type") or BackendType.MYSQL.value
        try:
            backend = BackendType(str(raw_type).strip().lower())
        except ValueError:
            valid = ", ".join(b.value for b in BackendType)
            raise ConfigError(
                f"Unknown backend type {raw_type!r} (expected one of: {valid})"
            ) from None

        port = data.get("port")
        if port is not None and (not isinstance(port, int) or isinstance(port, bool)):
            raise ConfigError("Field 'port' must be an integer")

        timeout = data.get("timeout")
        if timeout is not None and not isinstance(timeout, (int, float)):
            raise ConfigError("Field 'timeout' must be a number of seconds")

        return cls(
            type=backend,
            host=_str_field(data, "host"),
            port=port,
            database=_str_field(data, "database"),
            username=_str_field(data, "username"),
            password=_str_field(data, "password"),
            auth_token=_str_field(data, "authToken"),
            timeout=float(timeout) if timeout is not None else None,
        )


def load_config(source: Union[str, Path, Dict[str, Any]]) -> LexiconConfig:
    """Load a config from a file path, a JSON/YAML string, or a dictionary.

    Raises:
        ConfigError: If the content cannot be parsed or is invalid
        FileNotFoundError: If the file does not exist
    """
    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or (isinstance(source, str) and _is_file_path(source)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = _load_file(path)
    else:
        data = _load_string(source)

    return LexiconConfig.from_dict(data)


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path."""
    if "/" in s or "\\" in s:
        return True
    return s.endswith((".json", ".yaml", ".yml"))


def _load_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.suffix == ".json":
        return _load_json(text)
    return _load_string(text)


def _load_json(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON: {e.msg}", line=e.lineno) from e
    return _check_root(data)


def _load_string(text: str) -> Dict[str, Any]:
    # JSON without tab indentation is valid YAML
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise ConfigError(
            f"Invalid config: {e}", line=mark.line + 1 if mark else None
        ) from e
    return _check_root(data)


def _check_root(data: Any) -> Dict[str, Any]:
    if data is None:
        raise ConfigError("Empty config")
    if not isinstance(data, dict):
        raise ConfigError("Config root must be an object")
    return data


def _str_field(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"Field '{name}' must be a string")
    return value.strip()


def _validate(cfg: LexiconConfig) -> None:
    if not isinstance(cfg.type, BackendType):
        raise ConfigError(f"Unknown backend type {cfg.type!r}")

    if cfg.port is not None and not 0 < cfg.port < 65536:
        raise ConfigError(f"Port out of range: {cfg.port}")

    has_login = bool(cfg.username or cfg.password)
    has_token = bool(cfg.auth_token)

    if cfg.type.is_remote and not cfg.host:
        raise ConfigError("host is invalid")

    if cfg.type is BackendType.MYSQL:
        if has_token:
            raise ConfigError("mysql does not accept an authToken")
        if not cfg.username:
            raise ConfigError("mysql username is invalid")
        if not cfg.password:
            raise ConfigError("mysql password is invalid")
        if not cfg.database:
            raise ConfigError("mysql database is invalid")
    elif cfg.type is BackendType.LIBSQL_TOKEN:
        if has_login:
            raise ConfigError("libsql-token accepts only an authToken, not username/password")
        if not has_token:
            raise ConfigError("libsql-token requires an authToken")
    elif cfg.type is BackendType.LIBSQL:
        if has_login:
            raise ConfigError("libsql accepts only an optional authToken, not username/password")
    else:
        if has_login or has_token:
            raise ConfigError(f"{cfg.type.value} does not accept credentials")
        if not cfg.database:
            raise ConfigError("sqlite database path is invalid")
