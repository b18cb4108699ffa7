"""
CovidStats - Centralized Configuration

All environment variables, constants, and settings in one place.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Wire format version for the bundle, bulk snapshot and per-code payloads
FORMAT_VERSION = 1

# Country code whose locations are captioned by county (admin) name
US_COUNTRY_CODE = 'US'

DEFAULT_GLOBAL_PATH = str(Path(__file__).parent / 'data' / 'global.json')
DEFAULT_CACHE_DIR = str(Path.home() / '.cache' / 'covidstats')


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # Data locations
    data_base_url: str = 'https://tirania.org/covid-data'
    global_bundle_path: str = DEFAULT_GLOBAL_PATH
    snapshot_bundle_path: Optional[str] = None  # Bulk source disabled unless set

    # Cache settings
    cache_dir: str = DEFAULT_CACHE_DIR
    enable_disk_cache: bool = True
    snapshot_cache_ttl: int = 1800     # 30 minutes
    max_cache_size: int = 1000

    # HTTP settings
    http_timeout: float = 15.0

    # Number formatting (en-US convention by default)
    group_separator: str = ','
    decimal_separator: str = '.'

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            data_base_url=os.environ.get('COVIDSTATS_DATA_URL', 'https://tirania.org/covid-data').rstrip('/'),
            global_bundle_path=os.environ.get('COVIDSTATS_GLOBAL_PATH', DEFAULT_GLOBAL_PATH),
            snapshot_bundle_path=os.environ.get('COVIDSTATS_SNAPSHOT_PATH') or None,

            cache_dir=os.environ.get('COVIDSTATS_CACHE_DIR', DEFAULT_CACHE_DIR),
            enable_disk_cache=os.environ.get('COVIDSTATS_DISK_CACHE', 'true').lower() != 'false',  # On by default
            snapshot_cache_ttl=int(os.environ.get('SNAPSHOT_CACHE_TTL', 1800)),

            http_timeout=float(os.environ.get('COVIDSTATS_HTTP_TIMEOUT', 15.0)),

            group_separator=os.environ.get('COVIDSTATS_GROUP_SEP', ','),
            decimal_separator=os.environ.get('COVIDSTATS_DECIMAL_SEP', '.'),
        )


# Global config instance
config = Config.from_env()
