from .config_manager import Config, ConfigError
from .logger_utils import setup_logging, time_block

__all__ = ["Config", "ConfigError", "setup_logging", "time_block"]
