"""Latency summaries from backend aggregations.

Unlike the corpus summaries these read Elasticsearch aggregation buckets
directly. The percentile parser is strict: any deviation from the expected
shape fails the whole call. The slowest-trace parser tolerates missing
fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, ValidationError

from banktrack.aggregation.extract import as_text, get_path, load_json, text_at
from banktrack.models.types import (
    OperationPercentiles,
    PercentileValues,
    SlowTransaction,
    SlowTransactionSummary,
)

# Backend durations are microseconds
MICROS_PER_MILLI = 1000

SLOWEST_LIMIT = 5

_PERCENTILE_KEYS = {
    "p50": "50.0",
    "p75": "75.0",
    "p90": "90.0",
    "p95": "95.0",
    "p99": "99.0",
}


class MalformedResultError(ValueError):
    """Aggregation response does not have the expected shape."""


# Expected shape of the percentile response
class _PercentileAgg(BaseModel):
    values: dict[str, StrictFloat | StrictInt]


class _OperationBucket(BaseModel):
    key: StrictStr
    load_time_percentiles: _PercentileAgg


class _ByOperation(BaseModel):
    buckets: list[_OperationBucket]


class _Aggregations(BaseModel):
    by_operation: _ByOperation


class _TotalHits(BaseModel):
    value: StrictInt


class _Hits(BaseModel):
    total: _TotalHits


class _PercentileResponse(BaseModel):
    hits: _Hits
    aggregations: _Aggregations


def summarize_percentiles(result: Any) -> list[OperationPercentiles]:
    """Convert per-operation percentile buckets to milliseconds.

    Every operation reports the total hit count of the whole query as its
    transaction count.

    Args:
        result: Response of the percentiles query (decoded or raw JSON).

    Returns:
        One entry per `by_operation` bucket, in backend order.

    Raises:
        MalformedResultError: If the response is not JSON, or any required
            field is missing or not of the expected type.
    """
    try:
        response = _PercentileResponse.model_validate(load_json(result))
    except (ValidationError, ValueError) as e:
        raise MalformedResultError(f"Unexpected percentiles response: {e}") from e

    total = response.hits.total.value
    summaries: list[OperationPercentiles] = []

    for bucket in response.aggregations.by_operation.buckets:
        values = bucket.load_time_percentiles.values
        missing = [key for key in _PERCENTILE_KEYS.values() if key not in values]
        if missing:
            raise MalformedResultError(
                f"Bucket {bucket.key!r} is missing percentiles {', '.join(missing)}"
            )

        percentiles = PercentileValues(
            **{name: values[key] / MICROS_PER_MILLI for name, key in _PERCENTILE_KEYS.items()}
        )
        summaries.append(
            OperationPercentiles(
                operation_name=bucket.key,
                transaction_count=total,
                percentiles=percentiles,
            )
        )

    return summaries


def _duration_micros(value: Any) -> int:
    """Integer microseconds of a duration field, 0 when unusable."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(float(as_text(value)))
    except ValueError:
        return 0


def format_duration(micros: int) -> str:
    """Format microseconds as milliseconds, e.g. 12346 -> "12.35ms"."""
    return f"{micros / MICROS_PER_MILLI:.2f}ms"


def summarize_slowest(result: Any) -> SlowTransactionSummary:
    """Collect the slowest spans per endpoint.

    The backend sorts each bucket's top hits by duration, slowest first;
    that order is kept.

    Args:
        result: Response of the slowest query (decoded or raw JSON).

    Returns:
        endpoint -> up to 5 slow spans. Empty when the response is not JSON
        or has no `by_endpoint` buckets.
    """
    try:
        document = load_json(result)
    except ValueError:
        return {}

    found, buckets = get_path(document, "aggregations.by_endpoint.buckets")
    if not found or not isinstance(buckets, list):
        return {}

    summary: SlowTransactionSummary = {}
    for bucket in buckets:
        endpoint = text_at(bucket, "key")
        found, hits = get_path(bucket, "top_slow_transactions.hits.hits")
        if not found or not isinstance(hits, list):
            hits = []

        transactions: list[SlowTransaction] = []
        for hit in hits[:SLOWEST_LIMIT]:
            _, duration = get_path(hit, "_source.duration")
            transactions.append(
                SlowTransaction(
                    operation_name=text_at(hit, "_source.operationName"),
                    duration=format_duration(_duration_micros(duration)),
                )
            )

        summary[endpoint] = transactions

    return summary
