"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class EngineConfig(BaseSettings):
    """Credit due engine configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Fee structure defaults (basis points)
    yield_in_bps: int = 1000
    min_principal_rate_in_bps: int = 0
    late_fee_bps: int = 0

    # Front loading fees
    front_loading_fee_flat: int = 0  # Smallest unit of account
    front_loading_fee_bps: int = 0

    # Pool settings
    late_payment_grace_period_days: int = 5

    # Storage configuration
    database_url: str = "sqlite:///credit_engine.db"
    use_in_memory_storage: bool = False

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Feature flags
    enable_audit_logging: bool = True

    class Config:
        env_prefix = "CREDIT_ENGINE_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = EngineConfig()


def get_config() -> EngineConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> EngineConfig:
    """Reload configuration from environment"""
    global config
    config = EngineConfig()
    return config


def sqlite_path_from_url(database_url: str) -> str:
    """Extract the SQLite file path from a sqlite:/// URL"""
    prefix = "sqlite:///"
    if not database_url.startswith(prefix):
        raise ValueError(f"Only sqlite URLs are supported, got {database_url}")
    path = database_url[len(prefix):]
    return path or ":memory:"
