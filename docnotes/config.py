"""
Configuration for DocNotes.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Note record storage configuration."""

    backend: str = "filesystem"  # filesystem, sqlite
    root: str = "."
    notes_folder: str = "document-notes"
    sqlite_path: str = "data/docnotes.db"


class NavigationConfig(BaseModel):
    """Anchor navigation configuration."""

    # Editor readiness is polled, not awaited on an event
    max_attempts: int = Field(default=10, ge=1)
    poll_interval: float = Field(default=0.1, ge=0.0)


class HostConfig(BaseModel):
    """Local document host configuration."""

    documents_root: str = "."
    max_notifications: int = 100


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    navigation: NavigationConfig = Field(default_factory=NavigationConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            DOCNOTES_STORAGE_BACKEND: Record backend (filesystem, sqlite)
            DOCNOTES_STORAGE_ROOT: Root directory for the filesystem backend
            DOCNOTES_NOTES_FOLDER: Folder/namespace holding note records
            DOCNOTES_SQLITE_PATH: Database file for the sqlite backend
            DOCNOTES_NAV_MAX_ATTEMPTS: Editor polling attempts
            DOCNOTES_NAV_POLL_INTERVAL: Seconds between editor polls
            DOCNOTES_DOCUMENTS_ROOT: Directory served by the local host
            DOCNOTES_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            if value == "":
                return default
            # bool before int: bool is an int subclass
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            storage=StorageConfig(
                backend=get_env("DOCNOTES_STORAGE_BACKEND", "filesystem"),
                root=get_env("DOCNOTES_STORAGE_ROOT", "."),
                notes_folder=get_env("DOCNOTES_NOTES_FOLDER", "document-notes"),
                sqlite_path=get_env("DOCNOTES_SQLITE_PATH", "data/docnotes.db"),
            ),
            navigation=NavigationConfig(
                max_attempts=get_env("DOCNOTES_NAV_MAX_ATTEMPTS", 10),
                poll_interval=get_env("DOCNOTES_NAV_POLL_INTERVAL", 0.1),
            ),
            host=HostConfig(
                documents_root=get_env("DOCNOTES_DOCUMENTS_ROOT", "."),
                max_notifications=get_env("DOCNOTES_MAX_NOTIFICATIONS", 100),
            ),
            logging=LoggingConfig(
                level=get_env("DOCNOTES_LOG_LEVEL", "INFO"),
                log_to_file=get_env("DOCNOTES_LOG_TO_FILE", True),
                log_dir=get_env("DOCNOTES_LOG_DIR", "logs"),
                file_rotation=get_env("DOCNOTES_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("DOCNOTES_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("DOCNOTES_LOG_COMPRESSION", "zip"),
                serialize=get_env("DOCNOTES_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Env sections that differ from the defaults override YAML
        final_dict = {**config_dict}
        default = cls()
        if env_config.storage != default.storage:
            final_dict["storage"] = env_config.storage.model_dump()
        if env_config.navigation != default.navigation:
            final_dict["navigation"] = env_config.navigation.model_dump()
        if env_config.host != default.host:
            final_dict["host"] = env_config.host.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
