"""
Configuration module
"""
from bargen.config.settings import (
    settings,
    Settings,
    BarGeneratorSettings,
    LoggerConfig,
)

__all__ = [
    "settings",
    "Settings",
    "BarGeneratorSettings",
    "LoggerConfig",
]
