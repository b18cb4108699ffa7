"""Registry module - Bundled location table."""

from .location_registry import LocationRegistry, load_registry

__all__ = ['LocationRegistry', 'load_registry']
