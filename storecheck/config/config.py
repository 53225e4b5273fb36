"""
Configuration loading for the harness.

Values are resolved in this order, later sources winning:

1. The YAML file (``--config``, ``STORECHECK_CONFIG`` or the packaged
   ``etc/storecheck.yaml``)
2. ``SEED_ADMIN_EMAIL`` / ``SEED_ADMIN_PASSWORD``
3. ``E2E_BASE_URL`` / ``E2E_EMAIL`` / ``E2E_PASSWORD``
4. ``STORECHECK_<SECTION>_<KEY>`` overrides

Environment Variable Override Format:
    STORECHECK_<SECTION>_<KEY>=value

The section is matched first and the rest of the name is matched against
the section's field names, so keys containing underscores work:

    STORECHECK_LOGGING_LEVEL=debug
    STORECHECK_DATABASE_SERVER_URL=postgresql://postgres@localhost/postgres
    STORECHECK_RUNNER_REPORTS_HTML=out/report.html
"""

import os
import types
import typing
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigError
from .schemas import HarnessConfig

ENV_PREFIX = "STORECHECK_"
CONFIG_ENV = "STORECHECK_CONFIG"

# Maximum config file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

# Plain environment variables understood for compatibility with CI jobs, in
# ascending precedence
ENV_ALIASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("SEED_ADMIN_EMAIL", ("credentials", "email")),
    ("SEED_ADMIN_PASSWORD", ("credentials", "password")),
    ("E2E_BASE_URL", ("runner", "base_url")),
    ("E2E_EMAIL", ("credentials", "email")),
    ("E2E_PASSWORD", ("credentials", "password")),
)


def default_config_path() -> Path:
    """Path of the configuration file shipped with the package."""
    return Path(__file__).resolve().parent.parent / "etc" / "storecheck.yaml"


def _check_file_size(path: Path) -> None:
    size = os.path.getsize(path)
    if size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError("configuration file too large", path=str(path), size=size)


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from disk; an empty file is an empty mapping."""
    if not path.is_file():
        raise ConfigError("configuration file not found", path=str(path))
    _check_file_size(path)

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError("malformed configuration file", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            "configuration root must be a mapping",
            path=str(path),
            type=type(data).__name__,
        )
    return data


def _convert_env_value(value: str) -> bool | int | float | str | list | None:
    """
    Convert environment variable string to appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        Converted value with appropriate type
    """
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    if "," in value:
        return [_convert_env_value(v.strip()) for v in value.split(",")]

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value


def _is_text(annotation: Any) -> bool:
    """True for ``str`` and ``str | None`` fields, whose values stay verbatim."""
    if annotation is str:
        return True
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        return args == [str]
    return False


def _env_key_to_path(
    env_key: str, model: type[BaseModel] = HarnessConfig
) -> tuple[list[str], Any] | None:
    """
    Convert an environment variable key to a configuration path.

    Each level takes the longest run of ``_``-separated words that names a
    field of the current model, so ``RUNNER_REPORTS_SERVER_JUNIT`` resolves
    to ``runner.reports.server_junit``.

    Returns:
        The path and the annotation of the addressed field, or None when the
        key does not name a field
    """
    words = env_key[len(ENV_PREFIX) :].lower().split("_")
    path: list[str] = []
    current: Any = model

    while words:
        if not (isinstance(current, type) and issubclass(current, BaseModel)):
            return None
        for n in range(len(words), 0, -1):
            name = "_".join(words[:n])
            if name in current.model_fields:
                path.append(name)
                current = current.model_fields[name].annotation
                words = words[n:]
                break
        else:
            return None

    return (path, current) if path else None


def _set_nested_value(
    data: dict, path: list[str] | tuple[str, ...], value: Any
) -> None:
    """Set a nested value, creating intermediate mappings as needed."""
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def collect_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """
    Get all environment overrides that would be applied, keyed by dotted path.

    Unknown ``STORECHECK_*`` names are ignored; ``STORECHECK_CONFIG`` names
    the file and is not an override.
    """
    overrides: dict[str, Any] = {}

    for name, path in ENV_ALIASES:
        if env.get(name):
            overrides[".".join(path)] = env[name]

    for key in sorted(env):
        if not key.startswith(ENV_PREFIX) or key == CONFIG_ENV:
            continue
        resolved = _env_key_to_path(key)
        if resolved is None:
            continue
        path, annotation = resolved
        raw = env[key]
        if _is_text(annotation) and raw.lower() not in ("null", "none"):
            value: Any = raw
        else:
            value = _convert_env_value(raw)
        if not isinstance(value, list) and typing.get_origin(annotation) is list:
            value = [value]
        overrides[".".join(path)] = value

    return overrides


def load_config(
    path: str | Path | None = None, env: Mapping[str, str] | None = None
) -> HarnessConfig:
    """
    Load and validate the harness configuration.

    Args:
        path: YAML file to read; ``STORECHECK_CONFIG`` or the packaged default
            when None
        env: Environment to read overrides from, ``os.environ`` when None

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file cannot be read or the result does not validate
    """
    if env is None:
        env = os.environ
    if path is None:
        path = env.get(CONFIG_ENV) or default_config_path()

    fname = Path(path).expanduser().resolve()
    data = _read_yaml(fname)

    for dotted, value in collect_env_overrides(env).items():
        _set_nested_value(data, dotted.split("."), value)

    try:
        return HarnessConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            "invalid configuration", path=str(fname), errors=e.error_count()
        ) from e


def dump_config(cfg: HarnessConfig) -> str:
    """Render a configuration as YAML."""
    return yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False)
