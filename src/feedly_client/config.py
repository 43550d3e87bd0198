"""Configuration management for the Feedly client."""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_serializer, field_validator, model_validator

from .errors import ConfigError
from .utils.paths import get_config_file_path

SANDBOX_HOST = "sandbox.feedly.com"
PRODUCTION_HOST = "cloud.feedly.com"


class ClientConfig(BaseModel):
    """Credentials and fixed request settings for one Feedly client."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    sandbox: StrictBool = False
    additional_headers: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    token: Optional[str] = None
    secret: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0, description="Seconds handed to requests, None waits forever")

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_optionals(cls, data: Any) -> Any:
        """Treat empty strings for token/secret as unset."""
        if not isinstance(data, dict):
            return data

        data = data.copy()
        for key in ("token", "secret"):
            if data.get(key) == "":
                data[key] = None
        if data.get("additional_headers") is None:
            data.pop("additional_headers", None)
        return data

    @field_validator("client_id", "client_secret")
    @classmethod
    def strip_credentials(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("additional_headers")
    @classmethod
    def validate_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        for name, header_value in value.items():
            if not name or any(c in name for c in ":\r\n "):
                raise ValueError(f"Invalid header name: {name!r}")
            if "\r" in header_value or "\n" in header_value:
                raise ValueError(f"Header {name} contains a line break")
        return MappingProxyType(dict(value))

    @field_serializer("additional_headers")
    def serialize_headers(self, value: Mapping[str, str]) -> Dict[str, str]:
        return dict(value)

    @property
    def service_host(self) -> str:
        """API host selected by the sandbox flag."""
        return SANDBOX_HOST if self.sandbox else PRODUCTION_HOST


class AppConfig(BaseModel):
    """Configuration file layout used by the command line tool."""

    model_config = ConfigDict(extra="ignore")

    client: ClientConfig
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Optional file to mirror log output into")

    @model_validator(mode="before")
    @classmethod
    def _apply_flat_layout(cls, data: Any) -> Any:
        """Accept client settings at the top level of the file as well."""
        if not isinstance(data, dict) or "client" in data:
            return data

        client_keys = set(ClientConfig.model_fields)
        client = {k: v for k, v in data.items() if k in client_keys}
        rest = {k: v for k, v in data.items() if k not in client_keys}
        rest["client"] = client
        return rest

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @field_validator("log_file")
    @classmethod
    def expand_log_file(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return str(Path(v).expanduser())


def load_config(config_file: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_file: Optional path to config file. If None, uses default path.

    Returns:
        AppConfig object

    Raises:
        ConfigError: If the file does not exist or cannot be read
        pydantic.ValidationError: If the file content is invalid
    """
    if config_file is None:
        config_file = get_config_file_path()

    if not config_file.exists():
        raise ConfigError(
            f"Config file not found: {config_file} (use 'feedly-client config --example' to create one)"
        )

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        config = AppConfig.model_validate(data)
        logging.debug(f"Loaded config from {config_file}")
        return config

    except OSError as e:
        logging.error(f"Error reading config from {config_file}: {e}")
        raise ConfigError(f"Cannot read {config_file}: {e}") from e

    except (yaml.YAMLError, ValueError) as e:
        logging.error(f"Error loading config from {config_file}: {e}")
        raise


def save_config(config: AppConfig, config_file: Optional[Path] = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: AppConfig object to save
        config_file: Optional path to config file. If None, uses default path.
    """
    if config_file is None:
        config_file = get_config_file_path()

    config_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config.model_dump(), f, default_flow_style=False, indent=2)

        logging.debug(f"Saved config to {config_file}")

    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Error saving config to {config_file}: {e}")
        raise


def create_example_config() -> str:
    """Create an example configuration YAML string."""
    example_config = AppConfig(
        client=ClientConfig(
            client_id="sandbox",
            client_secret="YOUR_CLIENT_SECRET",
            sandbox=True,
            additional_headers={"X-Feedly-Client": "feedly-client"},
        ),
        log_level="INFO",
    )

    return yaml.safe_dump(example_config.model_dump(), default_flow_style=False, indent=2)
