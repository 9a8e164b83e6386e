"""
Configuration package for the billing engine.

Contains environment settings and logging setup.
"""

from app.config.settings import Settings, get_settings, settings
from app.config.logging import get_logger, setup_logging

__all__ = ['Settings', 'get_settings', 'settings', 'get_logger', 'setup_logging']
