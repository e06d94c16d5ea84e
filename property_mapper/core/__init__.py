"""
Core module providing shared configuration and utilities.

This module consolidates common functionality used across the codebase:
- Configuration management (settings, environment variables)
- Utility functions (address cleanup, region tables)

Usage:
    from property_mapper.core import settings
    from property_mapper.core.utils import expand_region_abbreviation, find_address_in_text
"""

from property_mapper.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
