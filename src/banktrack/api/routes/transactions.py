"""Cross-bank and latency API endpoints.

GET /transactions/from/{bank_id1}/to/{bank_id2} - transactions between banks
GET /transactions/slowest - slowest spans per endpoint
GET /transactions/percentiles - latency percentiles per endpoint
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from banktrack.aggregation import summary, traces
from banktrack.api.app import get_backend, get_settings
from banktrack.config import Settings
from banktrack.models.types import (
    ERROR_RESPONSES,
    BetweenBanksCount,
    OperationPercentiles,
    SlowTransactionSummary,
)
from banktrack.search import queries
from banktrack.search.base import SearchBackend

router = APIRouter(prefix="/transactions", responses=ERROR_RESPONSES)


@router.get("/from/{bank_id1}/to/{bank_id2}", response_model=BetweenBanksCount)
def get_between_banks(
    bank_id1: str,
    bank_id2: str,
    backend: SearchBackend = Depends(get_backend),
) -> BetweenBanksCount:
    """Count successful transactions between two banks in either direction.

    Raises:
        HTTPException: 400 if either bank id is blank.
    """
    if not bank_id1.strip() or not bank_id2.strip():
        raise HTTPException(
            status_code=400,
            detail="Both bankID1 and bankID2 are required in the URL path",
        )

    count = summary.count_between_banks(backend.fetch_corpus(), bank_id1, bank_id2)
    return BetweenBanksCount(
        transaction_count=count,
        from_bank_id=bank_id1,
        to_bank_id=bank_id2,
    )


@router.get("/slowest", response_model=SlowTransactionSummary)
def get_slowest(
    backend: SearchBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
) -> SlowTransactionSummary:
    """Return the five slowest spans of each transaction endpoint."""
    result = backend.fetch_with_query(queries.slowest_query(settings.service_name))
    return traces.summarize_slowest(result)


@router.get("/percentiles", response_model=list[OperationPercentiles])
def get_percentiles(
    backend: SearchBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
) -> list[OperationPercentiles]:
    """Return p50/p75/p90/p95/p99 latency in milliseconds per endpoint."""
    result = backend.fetch_with_query(queries.percentiles_query(settings.service_name))
    return traces.summarize_percentiles(result)
