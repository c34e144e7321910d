"""
Configuration Loader (``invest_config.loader``).

Responsibility
--------------
Loads the runtime YAML file, applies environment overrides and parses the
result into a frozen ``RuntimeConfig``.  Callers use
``invest_config.get_active_config()``; this module is its implementation.

Invariants enforced
-------------------
* Every parsed value is type-checked; a bad value raises
  ``ConfigurationError`` naming the dotted key, never a silent default.
* Unknown top-level sections are rejected so a typo cannot be ignored.
* A relative ``distribution.run_log_path`` is resolved against the project
  root, so the log lands in the same place whatever directory cron starts
  the run from.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong type / out-of-range value  -> ``ConfigurationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from invest_config.schema import LOG_LEVELS, RuntimeConfig
from invest_kernel.exceptions import ConfigurationError

ENV_CONFIG_PATH = "INVEST_CONFIG_PATH"
ENV_DATABASE_URL = "INVEST_DATABASE_URL"
ENV_RUN_LOG_PATH = "INVEST_RUN_LOG_PATH"
ENV_LOG_LEVEL = "INVEST_LOG_LEVEL"

_SECTIONS = ("database", "distribution", "logging")

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top-level YAML must be a mapping")
    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(name, "must be a mapping")
    return value


def _int(section: Mapping[str, Any], prefix: str, key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{prefix}.{key}", f"expected integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{prefix}.{key}", "must be >= 0")
    return value


def _bool(section: Mapping[str, Any], prefix: str, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{prefix}.{key}", f"expected boolean, got {value!r}")
    return value


def _str(section: Mapping[str, Any], prefix: str, key: str, default: str | None) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{prefix}.{key}", "expected non-empty string")
    return value


def apply_env_overrides(
    data: dict[str, Any], environ: Mapping[str, str],
) -> dict[str, Any]:
    """Return a copy of ``data`` with INVEST_* environment values applied."""
    merged = {name: dict(_section(data, name)) for name in _SECTIONS}

    if environ.get(ENV_DATABASE_URL):
        merged["database"]["url"] = environ[ENV_DATABASE_URL]
    if environ.get(ENV_RUN_LOG_PATH):
        merged["distribution"]["run_log_path"] = environ[ENV_RUN_LOG_PATH]
    if environ.get(ENV_LOG_LEVEL):
        merged["logging"]["level"] = environ[ENV_LOG_LEVEL]

    return merged


def parse_runtime_config(
    data: Mapping[str, Any], base_dir: Path = PROJECT_ROOT,
) -> RuntimeConfig:
    """Validate a merged config mapping and build ``RuntimeConfig``.

    A relative ``run_log_path`` is joined to ``base_dir``.
    """
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigurationError(unknown[0], "unknown configuration section")

    database = _section(data, "database")
    distribution = _section(data, "distribution")
    logging_section = _section(data, "logging")

    database_url = _str(database, "database", "url", None)
    try:
        make_url(database_url)
    except ArgumentError as exc:
        raise ConfigurationError("database.url", str(exc)) from exc

    log_level = _str(logging_section, "logging", "level", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(
            "logging.level", f"must be one of {', '.join(LOG_LEVELS)}",
        )

    pool_size = _int(database, "database", "pool_size", 5)
    if pool_size < 1:
        raise ConfigurationError("database.pool_size", "must be >= 1")

    run_log_path = Path(
        _str(distribution, "distribution", "run_log_path", "logs/daily-profits.log")
    ).expanduser()

    return RuntimeConfig(
        database_url=database_url,
        item_delay_ms=_int(distribution, "distribution", "item_delay_ms", 100),
        run_log_path=str(base_dir / run_log_path),
        statement_timeout_ms=_int(database, "database", "statement_timeout_ms", 30000),
        lock_timeout_ms=_int(database, "database", "lock_timeout_ms", 5000),
        log_level=log_level,
        pool_size=pool_size,
        echo_sql=_bool(database, "database", "echo_sql", False),
        report_after_run=_bool(distribution, "distribution", "report_after_run", True),
    )


def mask_database_url(database_url: str) -> str:
    """Render a URL for logs with the password hidden."""
    return make_url(database_url).render_as_string(hide_password=True)
