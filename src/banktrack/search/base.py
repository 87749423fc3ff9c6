"""Base search backend interface.

Backends implement two narrow calls: fetch the transaction corpus, or run a
caller-supplied aggregation query. They never aggregate and never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BackendError(Exception):
    """A failed backend round-trip.

    Covers both transport failures (status is None) and error envelopes
    returned by the cluster.

    Attributes:
        status: HTTP status reported by the cluster, if any.
        error_type: Backend error type, or the transport exception name.
        reason: Human-readable reason.
    """

    def __init__(self, reason: str, status: int | None = None, error_type: str | None = None):
        self.status = status
        self.error_type = error_type
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"{self.error_type}: {self.reason}" if self.error_type else self.reason
        if self.status is None:
            return message
        return f"[{self.status}] {message}"


class SearchBackend(ABC):
    """Abstract base class for search backends.

    Implementations return the decoded JSON body of the search response and
    raise BackendError on any failure.
    """

    @abstractmethod
    def fetch_corpus(self) -> dict[str, Any]:
        """Fetch the transaction corpus.

        Returns:
            Search response with up to the configured result window of
            transaction spans carrying an `http.response.body` tag.
        """
        pass

    @abstractmethod
    def fetch_with_query(self, query: dict[str, Any]) -> dict[str, Any]:
        """Run a caller-supplied query against the analytics index.

        Args:
            query: Search request body (query, aggs, size, ...).

        Returns:
            Search response including aggregations.
        """
        pass
