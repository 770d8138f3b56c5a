# link_scout/__init__.py
"""
LinkScout package initializer.
Defines package version and exposes the finder API.
"""
__version__ = "0.1.0"

from link_scout.config import DEFAULT_MAX_WORKERS, FinderConfig, load_config
from link_scout.finder import Finder, InvalidURLError

__all__ = ["__version__", "DEFAULT_MAX_WORKERS", "Finder", "FinderConfig", "InvalidURLError", "load_config"]
