"""Tencent Cloud configuration.

``TencentCloud`` is an immutable configuration dataclass. It can be built
directly, from the environment, or from TOML files: ~/.cvmnode/defaults.toml
(global) and cvmnode.toml (project) are deep-merged and the
``[tencentcloud]`` table is resolved into a ``TencentCloud``.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, TypeAlias

from cvmnode.constants import CVM_API_VERSION, CVM_ENDPOINT, METADATA_URL, PROVIDER_NAME
from cvmnode.exceptions import ConfigurationError

RawConfig: TypeAlias = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".cvmnode" / "defaults.toml"
PROJECT_CONFIG_NAME = "cvmnode.toml"
SECTION = PROVIDER_NAME

ENV_VARS: dict[str, str] = {
    "secret_id": "TENCENTCLOUD_SECRET_ID",
    "secret_key": "TENCENTCLOUD_SECRET_KEY",
    "token": "TENCENTCLOUD_SESSION_TOKEN",
    "region": "TENCENTCLOUD_REGION",
}


@dataclass(frozen=True, slots=True)
class TencentCloud:
    """Tencent Cloud connection settings.

    Example:
        >>> from cvmnode.config import TencentCloud
        >>> config = TencentCloud(region="ap-guangzhou", secret_id="...", secret_key="...")

    Args:
        region: Region the DescribeInstances calls are scoped to.
        secret_id: API secret id.
        secret_key: API secret key.
        token: Session token for temporary credentials.
        endpoint: CVM API host.
        api_version: CVM API version.
        metadata_url: Root of the instance metadata service.
        request_timeout: Per-request timeout in seconds for both adapters.
    """

    region: str = ""
    secret_id: str = ""
    secret_key: str = ""
    token: str = ""
    endpoint: str = CVM_ENDPOINT
    api_version: str = CVM_API_VERSION
    metadata_url: str = METADATA_URL
    request_timeout: float = 10

    @classmethod
    def from_env(cls, **overrides: Any) -> TencentCloud:
        """Build from environment variables; explicit overrides win."""
        from_env = {field: os.environ[var] for field, var in ENV_VARS.items() if os.environ.get(var)}
        return cls(**{**from_env, **overrides})

    def with_env_defaults(self) -> TencentCloud:
        """Fill empty credential and region fields from the environment."""
        missing = {
            field: os.environ[var]
            for field, var in ENV_VARS.items()
            if not getattr(self, field) and os.environ.get(var)
        }
        return replace(self, **missing) if missing else self

    def validate(self) -> TencentCloud:
        """Check the settings the CVM API needs."""
        missing = [name for name in ("region", "secret_id", "secret_key") if not getattr(self, name)]
        if missing:
            hints = ", ".join(ENV_VARS[name] for name in missing)
            raise ConfigurationError(
                f"Missing Tencent Cloud settings: {', '.join(missing)}. "
                f"Set them in {PROJECT_CONFIG_NAME} or via {hints}."
            )
        if self.request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be positive, got {self.request_timeout}")
        return self


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        return tomllib.load(f)


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault(SECTION, {})
    return merged


def resolve_cloud(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> TencentCloud:
    config = load_config(project_dir=project_dir, global_path=global_path)
    raw = config[SECTION]
    if not isinstance(raw, dict):
        raise ConfigurationError(f"'{SECTION}' must be a table")

    known = {f.name for f in fields(TencentCloud)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown '{SECTION}' settings: {', '.join(unknown)}. Valid: {', '.join(sorted(known))}"
        )
    return TencentCloud(**raw).with_env_defaults()
