"""Elasticsearch search backend.

Wraps elasticsearch-py behind SearchBackend. One client is created at
startup and shared by all requests; calls are independent round-trips with
client-side retries disabled.
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, Elasticsearch, TransportError

from banktrack.config import Settings
from banktrack.search.base import BackendError, SearchBackend
from banktrack.search.queries import corpus_query

logger = logging.getLogger(__name__)

# Search body keys that the python client spells differently as kwargs
_BODY_KEY_RENAMES = {"_source": "source", "from": "from_"}


def create_client(settings: Settings) -> Elasticsearch:
    """Create an Elasticsearch client from settings.

    Args:
        settings: Service settings.

    Returns:
        Client with retries disabled.
    """
    kwargs: dict[str, Any] = {
        "hosts": settings.es_hosts,
        "verify_certs": settings.es_verify_certs,
        "max_retries": 0,
        "retry_on_timeout": False,
    }
    if settings.es_username:
        kwargs["basic_auth"] = (settings.es_username, settings.es_password or "")
    return Elasticsearch(**kwargs)


def _search_params(body: dict[str, Any]) -> dict[str, Any]:
    params = {_BODY_KEY_RENAMES.get(key, key): value for key, value in body.items()}
    params["track_total_hits"] = True
    return params


def _error_from_api(exc: ApiError) -> BackendError:
    """Translate a cluster error envelope into BackendError."""
    body = exc.body
    error = body.get("error") if isinstance(body, dict) else None

    if isinstance(error, dict) and "type" in error and "reason" in error:
        return BackendError(
            reason=str(error["reason"]),
            status=exc.status_code,
            error_type=str(error["type"]),
        )
    if isinstance(error, str):
        return BackendError(reason=error, status=exc.status_code)
    return BackendError(
        reason=f"error parsing the response body: {body!r}",
        status=exc.status_code,
    )


class ElasticsearchBackend(SearchBackend):
    """SearchBackend over a Jaeger span index.

    Corpus queries go to `corpus_index`; custom aggregation queries go to
    `analytics_index`.
    """

    def __init__(
        self,
        client: Elasticsearch,
        corpus_index: str,
        analytics_index: str,
        service_name: str,
        result_window: int = 1000,
    ):
        """Initialize backend.

        Args:
            client: Elasticsearch client.
            corpus_index: Index holding the transaction spans.
            analytics_index: Index used for latency aggregations.
            service_name: Jaeger process.serviceName of the bank API.
            result_window: Maximum spans fetched by fetch_corpus.
        """
        self.client = client
        self.corpus_index = corpus_index
        self.analytics_index = analytics_index
        self.service_name = service_name
        self.result_window = result_window

    @classmethod
    def from_settings(cls, settings: Settings) -> ElasticsearchBackend:
        """Build a backend and its client from settings."""
        return cls(
            client=create_client(settings),
            corpus_index=settings.corpus_index,
            analytics_index=settings.analytics_index,
            service_name=settings.service_name,
            result_window=settings.result_window,
        )

    def _search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.client.search(index=index, **_search_params(body))
        except ApiError as e:
            error = _error_from_api(e)
            logger.warning(f"Search on {index} rejected: {error}")
            raise error from e
        except TransportError as e:
            error = BackendError(reason=str(e), error_type=type(e).__name__)
            logger.warning(f"Search on {index} failed: {error}")
            raise error from e

        return response.body

    def fetch_corpus(self) -> dict[str, Any]:
        """Fetch the transaction corpus.

        Corpora larger than the result window are truncated; the truncation
        is logged.

        Returns:
            Decoded search response.

        Raises:
            BackendError: If the search fails.
        """
        body = corpus_query(self.service_name, size=self.result_window)
        result = self._search(self.corpus_index, body)

        hits = result.get("hits", {})
        total = hits.get("total", {})
        total_value = total.get("value") if isinstance(total, dict) else total
        returned = len(hits.get("hits", []))
        if isinstance(total_value, int) and total_value > returned:
            logger.warning(
                f"Corpus truncated: {total_value} matching spans, "
                f"{returned} returned (result window {self.result_window})"
            )

        return result

    def fetch_with_query(self, query: dict[str, Any]) -> dict[str, Any]:
        """Run an aggregation query against the analytics index.

        Args:
            query: Search body.

        Returns:
            Decoded search response.

        Raises:
            BackendError: If the search fails.
        """
        return self._search(self.analytics_index, query)
