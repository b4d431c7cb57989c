"""Configuration management for the photo gallery."""

from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


COLLISION_POLICIES = ("overwrite", "warn", "error")


class Config(BaseSettings):
    """Main configuration class.

    Values come from keyword arguments, an optional YAML/TOML file and
    ``GALLERY_*`` environment variables. The session secret and port also
    accept the bare ``SESSION_SECRET`` and ``PORT`` variables used by most
    hosting platforms.
    """

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Photo Gallery", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    # Server settings
    password: Optional[str] = Field(default=None, description="Shared gallery password")
    session_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("session_secret", "GALLERY_SESSION_SECRET", "SESSION_SECRET"),
        description="Secret mixed into the session token",
    )
    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(
        default=8000,
        validation_alias=AliasChoices("port", "GALLERY_PORT", "PORT"),
        description="Port to bind to",
    )
    site_root: Path = Field(default_factory=Path.cwd, description="Directory served by the gallery server")

    # Manifest generator settings
    assets_dir: Path = Field(default=Path("assets"), description="Directory holding the photos folder and manifest")
    thumbnail_suffix: str = Field(default="_small", description="Filename marker for thumbnails")
    full_suffix: str = Field(default="_large", description="Filename marker for full-size images")
    archive: Optional[str] = Field(default=None, description="Download archive path or URL")
    hero_eyebrow: Optional[str] = Field(default=None, description="Hero eyebrow text")
    hero_title: Optional[str] = Field(default=None, description="Hero title")
    hero_subtitle: Optional[str] = Field(default=None, description="Hero subtitle")
    hero_image: Optional[str] = Field(default=None, description="Hero image path or URL")
    probe_concurrency: int = Field(default=8, ge=1, description="Concurrent dimension probes")
    collision_policy: str = Field(default="overwrite", description="Reconciliation key collision handling")

    def __init__(self, config_file: Optional[Path] = None, **kwargs):
        """Initialize configuration with optional config file."""
        if config_file and config_file.exists():
            file_config = self._load_config_file(config_file)
            file_config.update(kwargs)
            kwargs = file_config

        super().__init__(**kwargs)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("thumbnail_suffix", "full_suffix")
    @classmethod
    def _strip_suffix(cls, value: str) -> str:
        return value.strip()

    @field_validator("collision_policy")
    @classmethod
    def _check_collision_policy(cls, value: str) -> str:
        policy = value.lower()
        if policy not in COLLISION_POLICIES:
            raise ValueError(f"collision_policy must be one of {', '.join(COLLISION_POLICIES)}")
        return policy

    @staticmethod
    def _load_config_file(config_file: Path) -> Dict[str, Any]:
        """Load configuration from file."""
        if config_file.suffix.lower() in ['.yaml', '.yml']:
            with open(config_file, 'r') as f:
                return yaml.safe_load(f) or {}
        elif config_file.suffix.lower() == '.toml':
            return toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config file format: {config_file.suffix}")

    def save_config(self, config_file: Path) -> None:
        """Save current configuration to file, leaving secrets out."""
        config_data = self.model_dump(mode="json", exclude={'password', 'session_secret'}, exclude_none=True)

        with open(config_file, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)

    @classmethod
    def load_from_file(cls, config_file: Path) -> "Config":
        """Load configuration from file."""
        return cls(config_file=config_file)

    @property
    def photos_dir(self) -> Path:
        """Root of the photo tree scanned by the manifest generator."""
        return self.assets_dir / "photos"

    @property
    def default_manifest_path(self) -> Path:
        """Generated manifest location, kept apart from a hand-edited gallery.json."""
        return self.assets_dir / "gallery.generated.json"


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
