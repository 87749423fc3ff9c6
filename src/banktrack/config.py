"""Runtime configuration.

All settings come from BANKTRACK_* environment variables so the same image
can point at different Elasticsearch clusters and span indices.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_ES_HOSTS = ["http://localhost:9200"]
DEFAULT_CORPUS_INDEX = "jaeger-span-2024-07-21"
DEFAULT_ANALYTICS_INDEX = "jaeger-span-2024-07-23"
DEFAULT_SERVICE_NAME = "java-bank-api"
DEFAULT_RESULT_WINDOW = 1000
DEFAULT_PORT = 3000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class Settings:
    """Service settings.

    Attributes:
        es_hosts: Elasticsearch node URLs.
        es_username: Optional basic-auth user.
        es_password: Optional basic-auth password.
        es_verify_certs: Verify TLS certificates of the cluster.
        corpus_index: Index queried for the transaction corpus.
        analytics_index: Index queried for latency aggregations.
        service_name: Jaeger `process.serviceName` of the bank API.
        result_window: Maximum number of spans fetched per corpus query.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        log_level: Root logging level name.
    """

    es_hosts: list[str] = field(default_factory=lambda: list(DEFAULT_ES_HOSTS))
    es_username: str | None = None
    es_password: str | None = None
    es_verify_certs: bool = True
    corpus_index: str = DEFAULT_CORPUS_INDEX
    analytics_index: str = DEFAULT_ANALYTICS_INDEX
    service_name: str = DEFAULT_SERVICE_NAME
    result_window: int = DEFAULT_RESULT_WINDOW
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings with defaults for every unset variable.

        Raises:
            ValueError: If a numeric or boolean variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        hosts = env.get("BANKTRACK_ES_HOSTS")
        if hosts:
            settings.es_hosts = [h.strip() for h in hosts.split(",") if h.strip()]

        settings.es_username = env.get("BANKTRACK_ES_USERNAME") or None
        settings.es_password = env.get("BANKTRACK_ES_PASSWORD") or None

        if "BANKTRACK_ES_VERIFY_CERTS" in env:
            settings.es_verify_certs = _parse_bool(
                "BANKTRACK_ES_VERIFY_CERTS", env["BANKTRACK_ES_VERIFY_CERTS"]
            )

        settings.corpus_index = env.get("BANKTRACK_CORPUS_INDEX", settings.corpus_index)
        settings.analytics_index = env.get("BANKTRACK_ANALYTICS_INDEX", settings.analytics_index)
        settings.service_name = env.get("BANKTRACK_SERVICE_NAME", settings.service_name)

        if "BANKTRACK_RESULT_WINDOW" in env:
            settings.result_window = _parse_int(
                "BANKTRACK_RESULT_WINDOW", env["BANKTRACK_RESULT_WINDOW"]
            )
            if settings.result_window <= 0:
                raise ValueError("BANKTRACK_RESULT_WINDOW must be positive")

        settings.host = env.get("BANKTRACK_HOST", settings.host)
        if "BANKTRACK_PORT" in env:
            settings.port = _parse_int("BANKTRACK_PORT", env["BANKTRACK_PORT"])

        settings.log_level = env.get("BANKTRACK_LOG_LEVEL", settings.log_level).upper()

        return settings
