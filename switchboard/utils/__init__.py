"""
Utilities Module
================

Common utilities shared across the application:
- logger: Structured logging with levels and context
- config: Centralized configuration management
"""

from switchboard.utils.logger import Logger, logger, set_log_level
from switchboard.utils.config import Config, load_config

__all__ = ["Logger", "logger", "set_log_level", "Config", "load_config"]
