"""
Utility modules
"""

from .errors import (
    MonitorError,
    MonitorErrorCode,
    CollectionError,
    ComponentNotFoundError,
    ConfigurationError,
)
from .parsers import format_age, format_timestamp, parse_label_selector, utc_now
from .retry import retry_on_k8s_error

__all__ = [
    "MonitorError",
    "MonitorErrorCode",
    "CollectionError",
    "ComponentNotFoundError",
    "ConfigurationError",
    "format_age",
    "format_timestamp",
    "parse_label_selector",
    "utc_now",
    "retry_on_k8s_error",
]
