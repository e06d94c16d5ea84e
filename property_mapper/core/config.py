"""
Centralized configuration management for the property mapper.

All configuration is loaded from environment variables with sensible defaults.
Use the `settings` singleton for accessing configuration values.

Usage:
    from property_mapper.core.config import settings

    # Access configuration
    print(settings.PROPERTIES_FILE)
    print(settings.NOMINATIM_GEOCODER_DELAY)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Tuple
from dotenv import load_dotenv

# Load environment variables from .env file
# Search in common locations
_env_paths = [
    Path(__file__).parent.parent.parent / ".env",  # repository root
    Path.cwd() / ".env",  # Current working directory
]

for env_path in _env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break

# Nominatim usage policy: at most one request per second
MIN_GEOCODER_DELAY = 1.0


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Listing Source
    # ==========================================================================
    SOURCE_BASE_URL: str = field(
        default_factory=lambda: os.getenv(
            "SOURCE_BASE_URL",
            "https://gshrealestate.com/properties/"
        )
    )
    LISTING_LINK_PATTERN: str = field(
        default_factory=lambda: os.getenv(
            "LISTING_LINK_PATTERN",
            r"^https://gshrealestate\.com/portfolio/.+"
        )
    )
    TITLE_SUFFIXES: Tuple[str, ...] = (
        " - GSH Real Estate",
        " – GSH Real Estate",
        " &#8211; GSH Real Estate",
    )

    # ==========================================================================
    # Storage Paths
    # ==========================================================================
    DATA_DIR: Path = field(
        default_factory=lambda: Path(os.getenv("DATA_DIR", "data"))
    )

    @property
    def PROPERTIES_FILE(self) -> Path:
        override = os.getenv("PROPERTIES_FILE")
        if override:
            return Path(override)
        return self.DATA_DIR / "properties.json"

    # ==========================================================================
    # Scraping Settings
    # ==========================================================================
    REQUEST_DELAY: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_DELAY", "0.5"))
    )
    MAX_RETRIES: int = field(
        default_factory=lambda: int(os.getenv("MAX_RETRIES", "3"))
    )
    REQUEST_TIMEOUT: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30"))
    )

    # ==========================================================================
    # Nominatim Geocoding
    # ==========================================================================
    NOMINATIM_SEARCH_URL: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_SEARCH_URL",
            "https://nominatim.openstreetmap.org/search"
        )
    )
    NOMINATIM_REVERSE_URL: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_REVERSE_URL",
            "https://nominatim.openstreetmap.org/reverse"
        )
    )
    NOMINATIM_USER_AGENT: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_USER_AGENT",
            "GSHPropertyMapper/1.2"
        )
    )
    NOMINATIM_GEOCODER_DELAY: float = field(
        default_factory=lambda: float(os.getenv("NOMINATIM_GEOCODER_DELAY", "1.0"))
    )

    # Appended to coarse queries so the provider stays in the right country
    COUNTRY_SUFFIX: str = field(
        default_factory=lambda: os.getenv("COUNTRY_SUFFIX", "USA")
    )

    # ==========================================================================
    # User Agent (listing pages reject non-browser clients)
    # ==========================================================================
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )

    def __post_init__(self):
        """Clamp the geocoder delay to the provider's minimum interval."""
        if self.NOMINATIM_GEOCODER_DELAY < MIN_GEOCODER_DELAY:
            self.NOMINATIM_GEOCODER_DELAY = MIN_GEOCODER_DELAY


# Singleton settings instance
settings = Settings()
