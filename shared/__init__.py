"""
WiFi Optimizer Shared Module
============================

Configuration, structured logging, console presentation and numeric
helpers shared across the WiFi Optimizer packages.
"""

from shared.config import ConfigurationError, WifiOptConfig

__all__ = ["ConfigurationError", "WifiOptConfig"]
