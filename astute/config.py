"""
Configuration management using Pydantic and YAML.
"""

from pathlib import Path
from typing import Any, Dict

import pendulum
import yaml
from pydantic import BaseModel, field_validator

from .domain.models import AuthParams


class AppConfig(BaseModel):
    """Application configuration."""
    api_url: str
    api_key: str
    api_username: str
    api_password: str
    timeout_seconds: float = 30
    timezone: str = "Australia/Sydney"

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Ensure the endpoint is an http(s) URL."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_url must start with http:// or https://, got {value!r}")
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the request timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is known to pendulum."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def auth_params(self) -> AuthParams:
        """Get the credentials shared by every call."""
        return AuthParams(
            api_url=self.api_url,
            api_key=self.api_key,
            api_username=self.api_username,
            api_password=self.api_password,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        return cls(**read_yaml_mapping(config_path))


def read_yaml_mapping(path: Path) -> Dict[str, Any]:
    """
    Read a YAML file whose root is a mapping.

    Raises:
        ValueError: If the file is not valid YAML or its root is not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping at the root level.")

    return data


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
