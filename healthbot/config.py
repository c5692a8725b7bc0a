"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Defaults reproduce the dashboard's behavior; alternates are opt-in
"""

import logging
import os
from functools import lru_cache
from typing import Literal, cast

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from healthbot.domain.errors import ConfigurationError
from healthbot.domain.models import GenericWellnessPolicy, HourDistance

# Load environment variables from .env file
load_dotenv()


class EngineConfig(BaseModel):
    """Rule engine and regeneration behavior."""

    simulated_delay_seconds: float = Field(
        default=1.0, ge=0.0, description="Artificial delay before a regenerated result lands"
    )
    active_window_hours: int = Field(
        default=1, ge=0, le=12, description="Hours either side of a reminder that count as due"
    )
    generic_wellness_policy: GenericWellnessPolicy = Field(
        default=GenericWellnessPolicy.PER_CONDITION,
        description="Repeat generic wellness reminders per condition or once per profile",
    )
    hour_distance: HourDistance = Field(
        default=HourDistance.LINEAR, description="Linear or circular hour distance"
    )


class StorageConfig(BaseModel):
    """Where the condition profile is persisted."""

    profile_path: str = Field(default="./healthbot_profile.json", description="Profile file")
    storage_key: str = Field(default="healthProfile", min_length=1, description="Document key")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    engine: EngineConfig = Field(default_factory=EngineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
    v = val.strip().lower()
    if v in {"dev", "development"}:
        return "development"
    if v in {"stage", "staging"}:
        return "staging"
    return "production"


def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
    v = val.strip().upper()
    return cast(
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
    )


def _parse_enum(enum_type: type, env_name: str, default: str):
    raw = os.getenv(env_name, default).strip().lower()
    try:
        return enum_type(raw)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"{env_name}={raw!r} is not one of: {allowed}") from e


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    engine_config = EngineConfig(
        simulated_delay_seconds=float(os.getenv("HEALTHBOT_SIMULATED_DELAY_SECONDS", "1.0")),
        active_window_hours=int(os.getenv("HEALTHBOT_ACTIVE_WINDOW_HOURS", "1")),
        generic_wellness_policy=_parse_enum(
            GenericWellnessPolicy, "HEALTHBOT_GENERIC_WELLNESS", "per_condition"
        ),
        hour_distance=_parse_enum(HourDistance, "HEALTHBOT_HOUR_DISTANCE", "linear"),
    )

    storage_config = StorageConfig(
        profile_path=os.getenv("HEALTHBOT_PROFILE_PATH", "./healthbot_profile.json"),
        storage_key=os.getenv("HEALTHBOT_STORAGE_KEY", "healthProfile"),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        engine=engine_config,
        storage=storage_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def configure_logging(config: LoggingConfig) -> None:
    """Configure structlog for JSON (production) or console (development) output."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, config.level))
    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n🩺 ENGINE CONFIGURATION")
    print(f"Simulated Delay: {config.engine.simulated_delay_seconds}s")
    print(f"Active Window: ±{config.engine.active_window_hours}h")
    print(f"Generic Wellness: {config.engine.generic_wellness_policy.value}")
    print(f"Hour Distance: {config.engine.hour_distance.value}")

    print("\n💾 STORAGE CONFIGURATION")
    print(f"Profile Path: {config.storage.profile_path}")
    print(f"Storage Key: {config.storage.storage_key}")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
