"""
Provider configuration.

The connection settings are the same for every module: they come either from
the module parameters (see `helpers.AUTH_OPTIONS`) or from a YAML file, which
is what the generator CLI and ad-hoc scripts use.
"""

from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from edgegrid_provider.errors import ConfigurationError


class ProviderConfig(BaseModel):
    """Connection settings shared by all upstream clients."""

    # Base URL of the API host, e.g. "https://akab-xxxx.luna.akamaiapis.net".
    api_url: str

    # Sent as the Authorization header. Request signing is out of scope.
    access_token: str = Field(repr=False)

    # Per-request timeout in seconds.
    timeout: int = 30

    validate_certs: bool = True

    # Lets a reseller's credentials act on a managed account.
    account_switch_key: str | None = None

    @field_validator("api_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number of seconds")
        return value

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "ProviderConfig":
        """Builds the configuration from Ansible module parameters."""
        fields = {k: v for k, v in params.items() if k in cls.model_fields and v is not None}
        return cls._validate(fields)

    @classmethod
    def from_file(cls, path: str) -> "ProviderConfig":
        """Loads the configuration from a YAML file."""
        try:
            with open(path, "r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError("config_file", f"cannot load '{path}': {e}")
        if not isinstance(raw, dict):
            raise ConfigurationError("config_file", f"'{path}' must contain a mapping")
        return cls._validate(raw)

    @classmethod
    def _validate(cls, fields: Dict[str, Any]) -> "ProviderConfig":
        try:
            return cls(**fields)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "config"
            raise ConfigurationError(field, first["msg"]) from e
