"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .domain.exceptions import ConfigError
from .domain.models import ScopingMode

MAX_BUFFER_MINUTES = 180

SHARED_RESOURCE_ALIASES = ("shared", "business")


class StoreConfig(BaseModel):
    """Connection settings for the remote booking store."""
    url: str = ""
    api_key: str = ""
    timeout_seconds: int = 30

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @property
    def is_configured(self) -> bool:
        return bool(self.url)


class DefaultsConfig(BaseModel):
    """Default settings for availability queries."""
    service_duration_minutes: int = 60
    buffer_minutes: int = 0
    horizon_days: int = 7
    nearest_horizon_days: int = 14
    nearest_limit: int = 3
    recurring_lookahead_days: int = 56
    scoping_mode: ScopingMode = ScopingMode.RESOURCE

    @field_validator("service_duration_minutes", "horizon_days", "nearest_limit", "recurring_lookahead_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @field_validator("nearest_horizon_days")
    @classmethod
    def validate_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Value must not be negative, got {value}")
        return value

    @field_validator("buffer_minutes")
    @classmethod
    def clamp_buffer(cls, value: int) -> int:
        """Keep the buffer within the range the business profile allows."""
        return clamp_buffer_minutes(value)


class Resource(BaseModel):
    """Bookable resource (barber) configuration."""
    name: str  # Used as alias
    resource_id: str


class AppConfig(BaseModel):
    """Application configuration."""
    store: StoreConfig = Field(default_factory=StoreConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    resources: List[Resource] = Field(default_factory=list)

    @field_validator("resources")
    @classmethod
    def validate_resources(cls, value: List[Resource]) -> List[Resource]:
        """Ensure resource aliases and ids are unique."""
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for resource in value:
            name_key = resource.name.lower()
            if name_key in SHARED_RESOURCE_ALIASES:
                raise ValueError(f"Resource name '{resource.name}' is reserved")
            if name_key in seen_names:
                raise ValueError(f"Duplicate resource name detected: {resource.name}")
            if resource.resource_id in seen_ids:
                raise ValueError(f"Duplicate resource id detected: {resource.resource_id}")
            seen_names.add(name_key)
            seen_ids.add(resource.resource_id)
        return value

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
            ConfigError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    def find_resource_by_name(self, name: str) -> Resource | None:
        """Find a resource by its name (alias)."""
        for resource in self.resources:
            if resource.name.lower() == name.lower():
                return resource
        return None

    def resolve_resource(self, identifier: Optional[str]) -> Optional[str]:
        """
        Resolve a resource identifier (alias or id) to a resource id.

        ``shared``/``business`` (or no identifier) select the business-wide
        resource, which is represented as None. Unknown identifiers are passed
        through as raw ids.
        """
        if identifier is None or identifier.lower() in SHARED_RESOURCE_ALIASES:
            return None

        resource = self.find_resource_by_name(identifier)
        if resource:
            return resource.resource_id

        return identifier


def clamp_buffer_minutes(value: Optional[float]) -> int:
    """Clamp a buffer to 0..180 minutes; missing values become 0."""
    if value is None:
        return 0
    return int(max(0, min(MAX_BUFFER_MINUTES, value)))


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
