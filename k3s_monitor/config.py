"""Monitor settings loaded from environment variables."""

import os
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional, Union

from .utils.errors import ConfigurationError

ENV_PREFIX = "K3S_MONITOR_"


@dataclass
class MonitorSettings:
    """Runtime settings

    Every field can be overridden with an environment variable prefixed with
    ``K3S_MONITOR_`` (e.g. ``K3S_MONITOR_CACHE_TTL=60``). ``PORT`` and
    ``KUBECONFIG`` are honoured as well.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    cache_ttl: float = 30.0
    kubectl_timeout: float = 15.0
    kubectl_context: Optional[str] = None
    kubeconfig: Optional[str] = None
    components_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MonitorSettings":
        """Create settings from environment variables."""
        environ = os.environ if environ is None else environ
        kwargs: Dict[str, Union[str, int, float]] = {}

        if environ.get("PORT"):
            kwargs["port"] = _convert("port", "int", environ["PORT"])
        if environ.get("KUBECONFIG"):
            kwargs["kubeconfig"] = environ["KUBECONFIG"]

        for fld in fields(cls):
            val = environ.get(f"{ENV_PREFIX}{fld.name.upper()}")
            if val is None or val == "":
                continue
            kwargs[fld.name] = _convert(fld.name, fld.type, val)

        settings = cls(**kwargs)
        settings.validate()
        return settings

    def validate(self) -> None:
        if not 0 < self.port < 65536:
            raise ConfigurationError("Port out of range", field="port", value=self.port)
        if self.cache_ttl < 0:
            raise ConfigurationError("Cache TTL must not be negative",
                                     field="cache_ttl", value=self.cache_ttl)
        if self.kubectl_timeout <= 0:
            raise ConfigurationError("kubectl timeout must be positive",
                                     field="kubectl_timeout", value=self.kubectl_timeout)


def _convert(name: str, type_name: object, value: str) -> Union[str, int, float]:
    type_name = getattr(type_name, "__name__", type_name)
    try:
        if type_name == "int":
            return int(value)
        if type_name == "float":
            return float(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}", field=name, value=value) from e
    return value
