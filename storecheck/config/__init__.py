"""
Harness configuration: a YAML file plus environment overrides, validated by
pydantic models.

Example:
    from storecheck.config import load_config

    cfg = load_config()
    cfg.runner.base_url
"""

from .config import (
    CONFIG_ENV,
    ENV_ALIASES,
    ENV_PREFIX,
    collect_env_overrides,
    default_config_path,
    dump_config,
    load_config,
)
from .schemas import (
    CredentialsConfig,
    DatabaseConfig,
    HarnessConfig,
    LoggingConfig,
    ReportConfig,
    RunnerConfig,
    StoreConfig,
)

__all__ = [
    "CONFIG_ENV",
    "ENV_ALIASES",
    "ENV_PREFIX",
    "collect_env_overrides",
    "default_config_path",
    "dump_config",
    "load_config",
    "CredentialsConfig",
    "DatabaseConfig",
    "HarnessConfig",
    "LoggingConfig",
    "ReportConfig",
    "RunnerConfig",
    "StoreConfig",
]
