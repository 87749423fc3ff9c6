"""Per-bank transaction summaries over the span corpus.

Each public function takes a corpus search response, walks it once through
iter_records and applies one counting rule. Records carrying an
exceptionType are failed transactions: only count_total and
count_exceptions look at them.

All functions are pure - no backend access, no state between calls.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from banktrack.aggregation.dates import is_date_in_range
from banktrack.aggregation.extract import iter_records
from banktrack.models.domain import ResponseBody
from banktrack.models.types import CountSummary, ExceptionSummary, TransferSummary

TRANSFER = "TRANSFER"


def _same_bank(bank_id: str, target: str) -> bool:
    """A blank id never matches, so records without a body never count."""
    return bank_id != "" and bank_id == target


def _succeeded_bodies(result: Any):
    for record in iter_records(result):
        if not record.body.has_exception:
            yield record.body


def _freeze(counts: defaultdict[str, defaultdict[str, int]]) -> CountSummary:
    return {name: dict(by_type) for name, by_type in counts.items()}


def count_by_bank(result: Any, bank_id: str) -> CountSummary:
    """Count successful transactions of a bank, by bank name and type.

    A record counts once under the source bank name when the source bank is
    `bank_id`, and once under the destination bank name when the destination
    bank is `bank_id` and has a name. Records without a transactionType are
    skipped.

    Args:
        result: Corpus search response.
        bank_id: Target bank id.

    Returns:
        bank name -> transaction type -> count.
    """
    counts: defaultdict[str, defaultdict[str, int]] = defaultdict(lambda: defaultdict(int))

    for body in _succeeded_bodies(result):
        if not body.transaction_type:
            continue

        if _same_bank(body.source_bank_id, bank_id):
            counts[body.source_bank_name][body.transaction_type] += 1

        if _same_bank(body.destination_bank_id, bank_id) and body.destination_bank_name:
            counts[body.destination_bank_name][body.transaction_type] += 1

    return _freeze(counts)


def count_transfers(result: Any, bank_id: str) -> TransferSummary:
    """Count successful transfers of a bank by counterparty and direction.

    Outgoing transfers are keyed "<destination bank name> (to)", incoming
    ones "<source bank name> (from)".

    Args:
        result: Corpus search response.
        bank_id: Target bank id.

    Returns:
        direction label -> "TRANSFER" -> count.
    """
    counts: defaultdict[str, defaultdict[str, int]] = defaultdict(lambda: defaultdict(int))

    for body in _succeeded_bodies(result):
        if body.transaction_type != TRANSFER:
            continue

        if _same_bank(body.source_bank_id, bank_id):
            counts[f"{body.destination_bank_name} (to)"][TRANSFER] += 1

        if _same_bank(body.destination_bank_id, bank_id):
            counts[f"{body.source_bank_name} (from)"][TRANSFER] += 1

    return _freeze(counts)


def count_between_banks(result: Any, bank_id1: str, bank_id2: str) -> int:
    """Count successful transactions between two banks, either direction."""
    if not bank_id1 or not bank_id2:
        return 0

    directions = {(bank_id1, bank_id2), (bank_id2, bank_id1)}
    return sum(
        1
        for body in _succeeded_bodies(result)
        if (body.source_bank_id, body.destination_bank_id) in directions
    )


def _bank_name_for(body: ResponseBody, bank_id: str) -> str:
    if _same_bank(body.source_bank_id, bank_id):
        return body.source_bank_name
    return body.destination_bank_name


def count_by_date(
    result: Any,
    bank_id: str,
    start_date: str,
    end_date: str = "",
) -> CountSummary:
    """Count successful transactions of a bank inside a date window.

    The bucket is the source bank name when the source bank is `bank_id`,
    otherwise the destination bank name.

    Args:
        result: Corpus search response.
        bank_id: Target bank id.
        start_date: First day, YYYY-MM-DD (exclusive of its midnight).
        end_date: Last day, YYYY-MM-DD, inclusive. "" means today.

    Returns:
        bank name -> transaction type -> count.
    """
    counts: defaultdict[str, defaultdict[str, int]] = defaultdict(lambda: defaultdict(int))

    for record in iter_records(result):
        body = record.body
        if not is_date_in_range(body.transaction_date, start_date, end_date):
            continue
        if body.has_exception:
            continue
        if not (
            _same_bank(body.source_bank_id, bank_id)
            or _same_bank(body.destination_bank_id, bank_id)
        ):
            continue

        counts[_bank_name_for(body, bank_id)][body.transaction_type] += 1

    return _freeze(counts)


def count_total(result: Any, bank_id: str) -> int:
    """Count all spans whose account bank is `bank_id`, failed ones included."""
    return sum(
        1 for record in iter_records(result) if _same_bank(record.body.account_bank_id, bank_id)
    )


def count_exceptions(result: Any, bank_id: str) -> ExceptionSummary:
    """Count failed transactions of a bank by exceptionType.

    Args:
        result: Corpus search response.
        bank_id: Target bank id, matched against accountDetails.bank.bankId.

    Returns:
        exception type -> count.
    """
    counts: defaultdict[str, int] = defaultdict(int)

    for record in iter_records(result):
        body = record.body
        if _same_bank(body.account_bank_id, bank_id) and body.has_exception:
            counts[body.exception_type] += 1

    return dict(counts)
