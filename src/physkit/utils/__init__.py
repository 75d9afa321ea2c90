"""
Utility modules.
"""

from .logging import setup_logging, get_logger
from .config import TransformConfig, load_config

__all__ = ['setup_logging', 'get_logger', 'TransformConfig', 'load_config']
