"""Per-bank API endpoints.

GET /bank/{bank_id}/transactions/total - spans of the bank, failed included
GET /bank/{bank_id}/transactions/count - successful transactions by type
GET /bank/{bank_id}/transactions/count/transfer - transfers by counterparty
GET /bank/{bank_id}/transactions/date/count - counts inside a date window
GET /bank/{bank_id}/transactions/exception - failures by exception type
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from banktrack.aggregation import summary
from banktrack.api.app import get_backend
from banktrack.models.types import (
    ERROR_RESPONSES,
    CountSummary,
    DateRangeCount,
    ExceptionSummary,
    TransferSummary,
)
from banktrack.search.base import SearchBackend

router = APIRouter(prefix="/bank/{bank_id}/transactions", responses=ERROR_RESPONSES)


def _require_bank_id(bank_id: str) -> None:
    if not bank_id.strip():
        raise HTTPException(status_code=400, detail="bankID is required in the URL path")


@router.get("/total", response_model=int)
def get_total(
    bank_id: str,
    backend: SearchBackend = Depends(get_backend),
) -> int:
    """Count every span of a bank, including failed transactions."""
    _require_bank_id(bank_id)
    return summary.count_total(backend.fetch_corpus(), bank_id)


@router.get("/count", response_model=CountSummary)
def get_count(
    bank_id: str,
    backend: SearchBackend = Depends(get_backend),
) -> CountSummary:
    """Count successful transactions of a bank by bank name and type."""
    _require_bank_id(bank_id)
    return summary.count_by_bank(backend.fetch_corpus(), bank_id)


@router.get("/count/transfer", response_model=TransferSummary)
def get_transfer_count(
    bank_id: str,
    backend: SearchBackend = Depends(get_backend),
) -> TransferSummary:
    """Count successful transfers of a bank by counterparty and direction."""
    _require_bank_id(bank_id)
    return summary.count_transfers(backend.fetch_corpus(), bank_id)


@router.get("/date/count", response_model=DateRangeCount)
def get_count_by_date(
    bank_id: str,
    start: str | None = None,
    end: str | None = None,
    backend: SearchBackend = Depends(get_backend),
) -> DateRangeCount:
    """Count successful transactions of a bank between two dates.

    Args:
        bank_id: Target bank id.
        start: First day, YYYY-MM-DD.
        end: Last day, YYYY-MM-DD, inclusive.
        backend: Search backend (injected).

    Returns:
        DateRangeCount echoing the request parameters.

    Raises:
        HTTPException: 400 if bank id, start or end is missing.
    """
    if not bank_id.strip() or not start or not end:
        raise HTTPException(
            status_code=400,
            detail="BankID, start date, and end date are required",
        )

    counts = summary.count_by_date(backend.fetch_corpus(), bank_id, start, end)
    return DateRangeCount(
        transaction_count=counts,
        bank_id=bank_id,
        start_date=start,
        end_date=end,
    )


@router.get("/exception", response_model=ExceptionSummary)
def get_exceptions(
    bank_id: str,
    backend: SearchBackend = Depends(get_backend),
) -> ExceptionSummary:
    """Count failed transactions of a bank by exception type."""
    _require_bank_id(bank_id)
    return summary.count_exceptions(backend.fetch_corpus(), bank_id)
