"""
Cercalia Client - typed client for the Cercalia geospatial web service.

Architecture:
- core/: Request pipeline (retry, transport, response normalization)
- config/: Client settings and environment loading
"""

__version__ = "0.1.0"

from .config import CercaliaConfig
from .core import CercaliaClient, CercaliaError, ErrorKind, is_no_results

__all__ = [
    "__version__",
    "CercaliaClient",
    "CercaliaConfig",
    "CercaliaError",
    "ErrorKind",
    "is_no_results",
]
