"""
Monitor error types

Structured errors used across the collectors and the API layer.
"""

from enum import Enum
from typing import Dict, Any, Iterable, Optional


class MonitorErrorCode(Enum):
    """Monitor error codes"""

    # Timeouts
    TIMEOUT = "TIMEOUT"

    # Cluster access
    PERMISSION_DENIED = "PERMISSION_DENIED"
    API_ERROR = "API_ERROR"
    API_UNAVAILABLE = "API_UNAVAILABLE"
    PARSE_ERROR = "PARSE_ERROR"

    # Lookups
    COMPONENT_NOT_FOUND = "COMPONENT_NOT_FOUND"

    # Configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    UNKNOWN = "UNKNOWN"


class MonitorError(Exception):
    """Base monitor exception

    Carries a message, an error code and free-form details so the error can
    be logged or serialized without losing context.

    Attributes:
        message: human readable message
        code: error code
        details: extra context (resource kind, command, ...)
    """

    def __init__(
        self,
        message: str,
        code: MonitorErrorCode = MonitorErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict

        Returns:
            {"error": str, "code": str, "details": dict}
        """
        return {
            "error": self.message,
            "code": self.code.value,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.value}] {self.message} ({details_str})"
        return f"[{self.code.value}] {self.message}"


class CollectionError(MonitorError):
    """Cluster data collection error

    Raised by the kubectl client when a list call fails. The fetcher turns it
    into an empty result, it never reaches the API layer.
    """

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        code: MonitorErrorCode = MonitorErrorCode.API_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: error description
            resource_type: resource kind being listed (pods, nodes, ...)
            code: error code
            details: extra context
        """
        all_details = details or {}
        if resource_type:
            all_details["resource_type"] = resource_type

        super().__init__(message, code, all_details)


class ComponentNotFoundError(MonitorError):
    """Requested component is not in the registry"""

    def __init__(self, name: str, available: Iterable[str]):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Component '{name}' not found. Available: {', '.join(self.available)}",
            MonitorErrorCode.COMPONENT_NOT_FOUND,
            {"component": name},
        )


class ConfigurationError(MonitorError):
    """Invalid registry or settings

    Used for input that fails validation at startup.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: error description
            field: offending field name
            value: offending value
            details: extra context
        """
        all_details = details or {}
        if field:
            all_details["field"] = field
        if value is not None:
            all_details["value"] = str(value)

        super().__init__(message, MonitorErrorCode.CONFIGURATION_ERROR, all_details)
