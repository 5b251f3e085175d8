"""
Configuration module for the Cercalia client.

Provides:
- Immutable client settings
- Environment variable loading
"""

from .settings import DEFAULT_BASE_URL, CercaliaConfig

__all__ = ["CercaliaConfig", "DEFAULT_BASE_URL"]
