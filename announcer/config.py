"""Configuration management using Pydantic Settings v2."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from ruamel.yaml import YAML

from announcer.exceptions import ConfigurationError


class FeedConfig(BaseSettings):
    """Announcement feed configuration."""

    model_config = SettingsConfigDict(env_prefix="FEED_")

    url: str = Field(default="https://nais.io/log/rss.xml", description="RSS feed URL")
    timeout: int = Field(default=30, ge=1, description="Request timeout in seconds")
    retry_attempts: int = Field(default=3, ge=1, description="Attempts on transport errors")


class SlackConfig(BaseSettings):
    """Slack destination configuration."""

    model_config = SettingsConfigDict(env_prefix="SLACK_")

    token: str = Field(default="", description="Bot token used for chat.* calls")
    channel_id: str = Field(default="", description="Destination channel id")
    api_url: str = Field(default="https://slack.com/api", description="Slack Web API base URL")
    timeout: int = Field(default=10, ge=1, description="Request timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, description="Attempts when rate limited")


class RedisConfig(BaseSettings):
    """Redis (Valkey) state store configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    url: str = Field(
        default="redis://localhost:6379",
        validation_alias="REDIS_URL",
        description="Connection URL used outside the cluster",
    )
    host: str | None = Field(default=None, validation_alias="REDIS_HOST_RSS")
    username: str | None = Field(
        default=None, validation_alias="REDIS_USERNAME_RSS"
    )
    password: str | None = Field(
        default=None, validation_alias="REDIS_PASSWORD_RSS"
    )
    port: str | None = Field(default=None, validation_alias="REDIS_PORT_RSS")
    timeout: float = Field(
        default=5.0,
        gt=0,
        validation_alias="REDIS_TIMEOUT",
        description="Socket timeout in seconds",
    )

    def uri(self, in_cluster: bool) -> str:
        """Build connection URI.

        Args:
            in_cluster: Whether the service runs inside the NAIS cluster

        Returns:
            rediss:// URI built from the instance credentials in cluster,
            the configured url otherwise
        """
        if in_cluster:
            return f"rediss://{self.username}:{self.password}@{self.host}:{self.port}"
        return self.url


class ReconcileConfig(BaseSettings):
    """Per-call timeouts applied by the reconciler."""

    model_config = SettingsConfigDict(env_prefix="RECONCILE_")

    fetch_timeout: float = Field(default=60.0, gt=0, description="Feed fetch timeout in seconds")
    sink_timeout: float = Field(default=15.0, gt=0, description="Chat call timeout in seconds")
    store_timeout: float = Field(default=5.0, gt=0, description="Store call timeout in seconds")


class SchedulerConfig(BaseSettings):
    """Scheduled reconciliation configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    enabled: bool = Field(default=False, description="Run reconciliation on a schedule")
    schedule: str = Field(default="*/15 * * * *", description="Crontab expression")
    timezone: str = Field(default="Europe/Oslo", description="Schedule timezone")


class HealthCheckConfig(BaseSettings):
    """Health check configuration."""

    model_config = SettingsConfigDict(env_prefix="HEALTH_")

    unhealthy_threshold: int = Field(
        default=3, ge=1, description="Consecutive failed runs before unhealthy"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    file: str | None = Field(default=None, description="Optional log file path")
    rotation: str = Field(default="100 MB", description="Log rotation size")
    retention: str = Field(default="7 days", description="Log retention period")
    json_format: bool = Field(default=True, description="Use JSON log format")


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, ge=1, le=65535, description="Bind port")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    dry_run: bool = Field(default=False, description="Log store and chat actions only")
    nais_cluster_name: str | None = Field(default=None, description="Set when running in NAIS")

    feed: FeedConfig = Field(default_factory=FeedConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    reconcile: ReconcileConfig = Field(default_factory=ReconcileConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    health: HealthCheckConfig = Field(default_factory=HealthCheckConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("dry_run", mode="before")
    @classmethod
    def _empty_dry_run_means_on(cls, value):
        """A DRY_RUN variable that is set but empty enables dry-run mode."""
        if isinstance(value, str) and not value.strip():
            return True
        return value

    @property
    def in_cluster(self) -> bool:
        """Whether the service runs inside the NAIS cluster."""
        return bool(self.nais_cluster_name)

    def validate_collaborators(self) -> None:
        """Check settings required by the Slack sink and Redis store.

        Nothing is checked in dry-run mode, where both collaborators are
        replaced by logging stand-ins.

        Raises:
            ConfigurationError: If a required setting is missing
        """
        if self.dry_run:
            return

        if not self.slack.token:
            raise ConfigurationError("Missing SLACK_TOKEN env; required in normal mode")
        if not self.slack.channel_id:
            raise ConfigurationError("Missing SLACK_CHANNEL_ID env; required in normal mode")

        if self.in_cluster:
            for field_name, env_name in (
                ("host", "REDIS_HOST_RSS"),
                ("username", "REDIS_USERNAME_RSS"),
                ("password", "REDIS_PASSWORD_RSS"),
                ("port", "REDIS_PORT_RSS"),
            ):
                if not getattr(self.redis, field_name):
                    raise ConfigurationError(
                        f"Missing {env_name} env; required when running in NAIS"
                    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Config":
        """Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        yaml = YAML(typ="safe")
        with open(config_path) as f:
            config_dict = yaml.load(f) or {}

        config_dict = cls._normalize_keys(config_dict)

        sections = {
            "feed": FeedConfig,
            "slack": SlackConfig,
            "redis": RedisConfig,
            "reconcile": ReconcileConfig,
            "scheduler": SchedulerConfig,
            "health": HealthCheckConfig,
            "logging": LoggingConfig,
            "server": ServerConfig,
        }
        kwargs = {
            name: section(**config_dict.pop(name, {})) for name, section in sections.items()
        }
        kwargs.update(config_dict)

        return cls(**kwargs)

    @staticmethod
    def _normalize_keys(data: dict) -> dict:
        """Convert hyphenated keys to underscored for Python compatibility.

        Args:
            data: Dictionary with possibly hyphenated keys

        Returns:
            Dictionary with normalized keys
        """
        normalized = {}
        for key, value in data.items():
            new_key = key.replace("-", "_")
            if isinstance(value, dict):
                normalized[new_key] = Config._normalize_keys(value)
            else:
                normalized[new_key] = value
        return normalized


def load_config(config_path: str | Path | None = None) -> Config:
    """Load application configuration.

    Args:
        config_path: Path to configuration file, defaults to ANNOUNCER_CONFIG
            or config/settings.yaml

    Returns:
        Config instance
    """
    if config_path is None:
        config_path = os.getenv("ANNOUNCER_CONFIG", "config/settings.yaml")
    try:
        return Config.from_yaml(config_path)
    except FileNotFoundError:
        return Config()


config: Config = load_config()
