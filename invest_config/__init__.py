"""
invest_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables directly.

Architecture position:
    Configuration.  Sits above ``invest_kernel`` and below ``invest_batch``
    and the scripts.  The kernel MUST NEVER import from ``invest_config``;
    the batch orchestrator translates ``RuntimeConfig`` into engine and
    distributor arguments.

Failure modes:
    - ``FileNotFoundError`` -- the YAML file does not exist.
    - ``yaml.YAMLError`` -- the YAML is malformed.
    - ``ConfigurationError`` -- a value is missing or has the wrong type.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from invest_config.loader import (
    ENV_CONFIG_PATH,
    apply_env_overrides,
    load_yaml_file,
    mask_database_url,
    parse_runtime_config,
)
from invest_config.schema import RuntimeConfig

_logger = logging.getLogger("invest_kernel.config")

# Default configuration file
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> RuntimeConfig:
    """The ONLY public configuration entrypoint.

    Resolution order for the file: ``config_path``, then
    ``INVEST_CONFIG_PATH``, then ``invest_config/sets/default.yaml``.
    Environment overrides are applied on top of the file.

    Args:
        config_path: Explicit YAML path.
        environ: Environment mapping.  Defaults to ``os.environ``.

    Returns:
        RuntimeConfig -- frozen, validated.
    """
    env = os.environ if environ is None else environ

    if config_path is None:
        config_path = env.get(ENV_CONFIG_PATH) or _DEFAULT_CONFIG_PATH
    path = Path(config_path)

    data = apply_env_overrides(load_yaml_file(path), env)
    config = parse_runtime_config(data)

    _logger.info(
        "config_loaded",
        extra={
            "config_path": str(path),
            "database_url": mask_database_url(config.database_url),
            "item_delay_ms": config.item_delay_ms,
            "run_log_path": config.run_log_path,
            "log_level": config.log_level,
        },
    )
    return config


__all__ = ["RuntimeConfig", "get_active_config"]
