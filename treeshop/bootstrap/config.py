"""
bootstrap/config.py - Application configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


@dataclass
class PricingConfig:
    """Pricing and proposal policy."""

    default_markup: float = 3.0
    validity_days: int = 7
    fuel_price_per_gallon: float = 4.25
    labor_rate: float = 35.0
    apply_bundle_discount: bool = True
    number_timezone: Optional[str] = None   # IANA zone for proposal number days, e.g. "America/New_York"

    # {"tree_removal": {"minimum": 900.0}, ...}
    rate_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "PricingConfig":
        overrides = os.getenv("TREESHOP_RATE_OVERRIDES")
        return cls(
            default_markup=float(os.getenv("TREESHOP_DEFAULT_MARKUP", "3.0")),
            validity_days=int(os.getenv("TREESHOP_VALIDITY_DAYS", "7")),
            fuel_price_per_gallon=float(os.getenv("TREESHOP_FUEL_PRICE", "4.25")),
            labor_rate=float(os.getenv("TREESHOP_LABOR_RATE", "35.0")),
            apply_bundle_discount=os.getenv("TREESHOP_BUNDLE_DISCOUNT", "true").lower() == "true",
            number_timezone=os.getenv("TREESHOP_NUMBER_TIMEZONE"),
            rate_overrides=json.loads(overrides) if overrides else {},
        )


@dataclass
class StorageConfig:
    """Record storage configuration."""

    backend: str = "json"           # json | memory
    data_dir: str = "./data"
    seed_sample_data: bool = True

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            backend=os.getenv("TREESHOP_STORAGE_BACKEND", "json"),
            data_dir=os.getenv("TREESHOP_DATA_DIR", "./data"),
            seed_sample_data=os.getenv("TREESHOP_SEED_SAMPLE_DATA", "true").lower() == "true",
        )


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    enable_docs: bool = True
    docs_url: str = "/docs"

    @classmethod
    def from_env(cls) -> "APIConfig":
        return cls(
            host=os.getenv("TREESHOP_API_HOST", "0.0.0.0"),
            port=int(os.getenv("TREESHOP_API_PORT", "8000")),
            enable_docs=os.getenv("TREESHOP_API_ENABLE_DOCS", "true").lower() == "true",
            docs_url=os.getenv("TREESHOP_API_DOCS_URL", "/docs"),
        )


@dataclass
class CacheConfig:
    """Loadout cost cache configuration."""

    enabled: bool = True
    loadout_ttl_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "CacheConfig":
        return cls(
            enabled=os.getenv("TREESHOP_CACHE_ENABLED", "true").lower() == "true",
            loadout_ttl_seconds=float(os.getenv("TREESHOP_CACHE_TTL", "60")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("TREESHOP_LOG_LEVEL", "INFO"),
            format=os.getenv("TREESHOP_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("TREESHOP_LOG_FILE"),
            json_logs=os.getenv("TREESHOP_JSON_LOGS", "false").lower() == "true",
        )


_SECTIONS = ("pricing", "storage", "api", "cache", "logging")


@dataclass
class TreeShopConfig:
    """Root configuration for the TreeShop application."""

    environment: str = "development"
    debug: bool = False
    version: str = "0.1.0"

    pricing: PricingConfig = field(default_factory=PricingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    api: APIConfig = field(default_factory=APIConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "TreeShopConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("TREESHOP_ENVIRONMENT", "development"),
            debug=os.getenv("TREESHOP_DEBUG", "false").lower() == "true",
            pricing=PricingConfig.from_env(),
            storage=StorageConfig.from_env(),
            api=APIConfig.from_env(),
            cache=CacheConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "TreeShopConfig":
        """Load configuration from JSON file, layered over the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "TreeShopConfig":
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section_name in _SECTIONS:
            if section_name not in data:
                continue
            section = getattr(config, section_name)
            for key, value in data[section_name].items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    logger.warning(f"Unknown config key ignored: {section_name}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "pricing": {
                "default_markup": self.pricing.default_markup,
                "validity_days": self.pricing.validity_days,
                "fuel_price_per_gallon": self.pricing.fuel_price_per_gallon,
                "labor_rate": self.pricing.labor_rate,
                "apply_bundle_discount": self.pricing.apply_bundle_discount,
                "number_timezone": self.pricing.number_timezone,
                "rate_overrides": self.pricing.rate_overrides,
            },
            "storage": {
                "backend": self.storage.backend,
                "data_dir": self.storage.data_dir,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
            },
            "cache": {
                "enabled": self.cache.enabled,
                "loadout_ttl_seconds": self.cache.loadout_ttl_seconds,
            },
        }


# Global config instance
_config: Optional[TreeShopConfig] = None


def load_config(filepath: Optional[str] = None) -> TreeShopConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        TreeShopConfig instance
    """
    global _config

    if filepath:
        _config = TreeShopConfig.from_file(filepath)
    else:
        default_paths = [
            "./treeshop.json",
            "./config/treeshop.json",
            os.path.expanduser("~/.treeshop/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = TreeShopConfig.from_file(path)
                return _config

        _config = TreeShopConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> TreeShopConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
