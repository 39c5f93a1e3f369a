"""
Core utilities and configuration for datapizza-ai.

This package provides the shared ambient pieces: environment-driven settings
and logging configuration.
"""

from datapizza_ai.core.config import LLMConfig, Settings, settings
from datapizza_ai.core.logging_config import get_logger, setup_logging

__all__ = ["LLMConfig", "Settings", "settings", "get_logger", "setup_logging"]
