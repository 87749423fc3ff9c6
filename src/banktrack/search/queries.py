"""Search request bodies.

Each builder returns a fresh dict in Elasticsearch search-body form, so
callers may tweak the result without affecting later requests.
"""

from __future__ import annotations

from typing import Any

from banktrack.models.domain import RESPONSE_BODY_TAG

TRANSACTION_OPERATIONS = (
    "POST /api/v1/transactions/fee",
    "POST /api/v1/transactions/deposit",
    "POST /api/v1/transactions/transfer",
    "POST /api/v1/transactions/withdraw",
    "POST /api/v1/transactions/refund",
    "POST /api/v1/transactions/payment",
)

PERCENTS = (50, 75, 90, 95, 99)

SLOWEST_PER_ENDPOINT = 5


def _operations_filter(service_name: str) -> list[dict[str, Any]]:
    return [
        {"terms": {"operationName": list(TRANSACTION_OPERATIONS)}},
        {"match": {"process.serviceName": service_name}},
    ]


def corpus_query(service_name: str, size: int = 1000) -> dict[str, Any]:
    """Build the fixed transaction corpus query.

    Selects spans of the six transaction endpoints of `service_name` that
    carry a nested `http.response.body` tag. Only the first `size` hits are
    returned; there is no pagination.

    Args:
        service_name: Jaeger process.serviceName of the bank API.
        size: Result window.

    Returns:
        Search body.
    """
    return {
        "query": {
            "bool": {
                "must": [
                    {
                        "bool": {
                            "should": [
                                {"match": {"operationName": op}}
                                for op in TRANSACTION_OPERATIONS
                            ]
                        }
                    },
                    {"match": {"process.serviceName": service_name}},
                    {
                        "nested": {
                            "path": "tags",
                            "query": {
                                "bool": {
                                    "must": [{"match": {"tags.key": RESPONSE_BODY_TAG}}]
                                }
                            },
                        }
                    },
                ]
            }
        },
        "_source": ["operationName", "tags"],
        "from": 0,
        "size": size,
    }


def percentiles_query(service_name: str) -> dict[str, Any]:
    """Build the per-operation latency percentile aggregation.

    Args:
        service_name: Jaeger process.serviceName of the bank API.

    Returns:
        Search body with `by_operation` terms buckets, each holding a
        `load_time_percentiles` aggregation over span `duration`.
    """
    return {
        "size": 0,
        "query": {"bool": {"filter": _operations_filter(service_name)}},
        "aggs": {
            "by_operation": {
                "terms": {"field": "operationName", "size": len(TRANSACTION_OPERATIONS)},
                "aggs": {
                    "load_time_percentiles": {
                        "percentiles": {"field": "duration", "percents": list(PERCENTS)}
                    }
                },
            }
        },
    }


def slowest_query(service_name: str, per_endpoint: int = SLOWEST_PER_ENDPOINT) -> dict[str, Any]:
    """Build the slowest-spans-per-endpoint aggregation.

    Args:
        service_name: Jaeger process.serviceName of the bank API.
        per_endpoint: Number of spans kept per operation.

    Returns:
        Search body with `by_endpoint` terms buckets, each holding the
        `top_slow_transactions` top hits sorted by duration, slowest first.
    """
    return {
        "size": 0,
        "query": {"bool": {"filter": _operations_filter(service_name)}},
        "aggs": {
            "by_endpoint": {
                "terms": {"field": "operationName", "size": len(TRANSACTION_OPERATIONS)},
                "aggs": {
                    "top_slow_transactions": {
                        "top_hits": {
                            "sort": [{"duration": {"order": "desc"}}],
                            "_source": {"includes": ["operationName", "duration"]},
                            "size": per_endpoint,
                        }
                    }
                },
            }
        },
    }
