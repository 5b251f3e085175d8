"""
Core layer - request execution pipeline for the Cercalia API.

Components:
- errors: CercaliaError tagged with an ErrorKind
- normalizer: attribute/value lookup across the JSON encodings of a field
- parsers: defensive numeric parsing, required coordinates
- models: Coordinate, BoundingBox, RetryAttempt
- retry: backoff retry controller and alternative-chain executor
- http_client: signed, retried, validated HTTP requests
"""

from .errors import (
    NO_RESULTS_CODE,
    CercaliaError,
    ErrorKind,
    classify_error,
    is_no_results,
    is_retryable,
)
from .normalizer import (
    NodeKind,
    array_element,
    array_size,
    get_attr,
    get_child,
    get_value,
    iter_array,
    node_kind,
)
from .parsers import (
    parse_float_or_none,
    parse_int_or_none,
    parse_long_or_none,
    parse_required_coordinate,
)
from .models import BoundingBox, Coordinate, RetryAttempt
from .retry import RetryPolicy, first_available, with_retry
from .http_client import CercaliaClient, unwrap_response

__all__ = [
    "NO_RESULTS_CODE",
    "CercaliaError",
    "ErrorKind",
    "classify_error",
    "is_no_results",
    "is_retryable",
    "NodeKind",
    "array_element",
    "array_size",
    "get_attr",
    "get_child",
    "get_value",
    "iter_array",
    "node_kind",
    "parse_float_or_none",
    "parse_int_or_none",
    "parse_long_or_none",
    "parse_required_coordinate",
    "BoundingBox",
    "Coordinate",
    "RetryAttempt",
    "RetryPolicy",
    "first_available",
    "with_retry",
    "CercaliaClient",
    "unwrap_response",
]
