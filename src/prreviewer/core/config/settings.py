"""Configuration management for the reviewer assignment service."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewerServiceConfig(BaseSettings):
    """Main configuration for the reviewer assignment service.

    Configuration can be loaded from:
    1. Environment variables (prefixed with PRREVIEWER_)
    2. YAML configuration file (pr-reviewer.yaml)
    3. Default values
    """

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8080, description="API port")

    # Database Configuration
    storage: str = Field(default="sqlite", description="Storage backend (sqlite or postgresql)")
    db_path: str = Field(default="./pr-reviewer.db", description="Database file path for SQLite")
    db_url: Optional[str] = Field(default=None, description="Database URL for PostgreSQL")

    # Security Configuration
    admin_token: str = Field(
        default="change-me",
        min_length=1,
        description="Static bearer token required by admin endpoints",
    )

    # Assignment Configuration
    selection_seed: Optional[int] = Field(
        default=None,
        description="Seed for the process-wide reviewer selection random source",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_prefix="PRREVIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_database_url(self) -> str:
        """Get the database URL based on configuration.

        Returns:
            Database URL string
        """
        if self.db_url:
            return self.db_url

        if self.storage == "sqlite":
            if self.db_path == ":memory:":
                return "sqlite+aiosqlite:///:memory:"
            # Ensure path is absolute
            db_path = Path(self.db_path)
            if not db_path.is_absolute():
                db_path = Path.cwd() / db_path
            return f"sqlite+aiosqlite:///{db_path}"
        elif self.storage == "postgresql":
            raise ValueError(
                "PostgreSQL selected but db_url not provided. "
                "Set PRREVIEWER_DB_URL or db_url in config file."
            )
        else:
            raise ValueError(f"Unknown storage backend: {self.storage}")

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ReviewerServiceConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ReviewerServiceConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file: {config_path}")

        return cls(**data)

    def to_yaml(self, config_path: str | Path) -> None:
        """Save configuration to YAML file."""
        config_path = Path(config_path)

        # Convert to dict and remove None values
        data = self.model_dump(exclude_none=True)

        with open(config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def create_default_config(cls, config_path: str | Path) -> "ReviewerServiceConfig":
        """Create a default configuration file and return it."""
        config = cls()
        config.to_yaml(config_path)
        return config


# Global configuration instance
_config: Optional[ReviewerServiceConfig] = None


def init_config(config_path: Optional[str | Path] = None) -> ReviewerServiceConfig:
    """Initialize the global configuration.

    Args:
        config_path: Optional path to YAML configuration file.
                    If not provided, uses environment variables and defaults.

    Returns:
        ReviewerServiceConfig instance
    """
    global _config

    if config_path:
        _config = ReviewerServiceConfig.from_yaml(config_path)
    else:
        # Try to load from default location
        default_paths = [
            Path("pr-reviewer.yaml"),
            Path("pr-reviewer.yml"),
            Path(".pr-reviewer.yaml"),
            Path.home() / ".pr-reviewer" / "config.yaml",
        ]

        for path in default_paths:
            if path.exists():
                _config = ReviewerServiceConfig.from_yaml(path)
                return _config

        # No config file found, use defaults and env vars
        _config = ReviewerServiceConfig()

    return _config


def get_config() -> ReviewerServiceConfig:
    """Get the global configuration instance, initializing it on first use."""
    if _config is None:
        return init_config()
    return _config
