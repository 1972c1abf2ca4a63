"""
bootstrap/ - Bootstrap Layer

Configuration, application context wiring, sample data and entry points.
"""

from .config import (
    TreeShopConfig,
    PricingConfig,
    StorageConfig,
    APIConfig,
    CacheConfig,
    LoggingConfig,
    load_config,
    get_config,
)

from .app import (
    AppContext,
    build_persistence,
    equipment_directory,
    employee_directory,
    loadout_directory,
    customer_directory,
    proposal_directory,
)

from .entrypoints import (
    setup_logging,
    cli_main,
    api_main,
    main,
)


__all__ = [
    # Config
    "TreeShopConfig",
    "PricingConfig",
    "StorageConfig",
    "APIConfig",
    "CacheConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    # App
    "AppContext",
    "build_persistence",
    "equipment_directory",
    "employee_directory",
    "loadout_directory",
    "customer_directory",
    "proposal_directory",
    # Entrypoints
    "setup_logging",
    "cli_main",
    "api_main",
    "main",
]
