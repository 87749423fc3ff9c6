"""Builders for Jaeger span search payloads used across tests."""

from __future__ import annotations

import json
from typing import Any

from banktrack.search.base import BackendError, SearchBackend


def bank(bank_id: Any, name: str | None = None) -> dict:
    """Bank reference as found under an account."""
    ref: dict[str, Any] = {"bankId": bank_id}
    if name is not None:
        ref["name"] = name
    return {"bank": ref}


def transaction(
    source: tuple[Any, str] | None = None,
    destination: tuple[Any, str] | None = None,
    account: Any = None,
    transaction_type: str | None = "DEPOSIT",
    date: str | None = None,
    **extra: Any,
) -> dict:
    """Response body document of a bank API call."""
    body: dict[str, Any] = {}
    if source is not None:
        body["sourceAccount"] = bank(*source)
    if destination is not None:
        body["destinationAccount"] = bank(*destination)
    if account is not None:
        body["accountDetails"] = bank(account)
    if transaction_type is not None:
        body["transactionType"] = transaction_type
    if date is not None:
        body["transactionDate"] = date
    body.update(extra)
    return body


def hit(
    body: dict | str | None,
    operation: str = "POST /api/v1/transactions/transfer",
    other_tags: list[dict] | None = None,
) -> dict:
    """Search hit whose tags carry `body` as the response body tag.

    body=None produces a span without the response body tag.
    """
    tags = list(other_tags or [{"key": "span.kind", "value": "server"}])
    if body is not None:
        value = body if isinstance(body, str) else json.dumps(body)
        tags.append({"key": "http.response.body", "value": value})
    return {"_index": "jaeger-span", "_source": {"operationName": operation, "tags": tags}}


def search_result(*hits: dict, total: int | None = None) -> dict:
    """Search response wrapping hits."""
    return {
        "took": 3,
        "timed_out": False,
        "hits": {
            "total": {"value": len(hits) if total is None else total, "relation": "eq"},
            "hits": list(hits),
        },
    }


def percentile_bucket(key: str, p50=1500, p75=2000, p90=3000, p95=4000, p99=9000) -> dict:
    return {
        "key": key,
        "doc_count": 10,
        "load_time_percentiles": {
            "values": {"50.0": p50, "75.0": p75, "90.0": p90, "95.0": p95, "99.0": p99}
        },
    }


def percentile_result(*buckets: dict, total: int = 42) -> dict:
    return {
        "hits": {"total": {"value": total, "relation": "eq"}, "hits": []},
        "aggregations": {"by_operation": {"buckets": list(buckets)}},
    }


def slow_bucket(key: str, durations: list[Any]) -> dict:
    return {
        "key": key,
        "doc_count": len(durations),
        "top_slow_transactions": {
            "hits": {
                "hits": [
                    {"_source": {"operationName": key, "duration": d}} for d in durations
                ]
            }
        },
    }


def slow_result(*buckets: dict) -> dict:
    return {
        "hits": {"total": {"value": 100, "relation": "eq"}, "hits": []},
        "aggregations": {"by_endpoint": {"buckets": list(buckets)}},
    }


class FakeBackend(SearchBackend):
    """In-memory SearchBackend recording every call."""

    def __init__(
        self,
        corpus: dict | None = None,
        aggregation: dict | None = None,
        error: BackendError | None = None,
    ):
        self.corpus = corpus if corpus is not None else search_result()
        self.aggregation = aggregation if aggregation is not None else {}
        self.error = error
        self.corpus_calls = 0
        self.queries: list[dict] = []

    def fetch_corpus(self) -> dict:
        self.corpus_calls += 1
        if self.error:
            raise self.error
        return self.corpus

    def fetch_with_query(self, query: dict) -> dict:
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.aggregation
