"""
Vitrin Core Package.

This package contains the translation caching layer of the Vitrin
catalog site: configuration, schemas and service classes.
"""

__version__ = "0.1.0"

from .logging_config import init_logging, get_logger

__all__ = ["init_logging", "get_logger"]
