"""Span extraction shared by every corpus summary.

Parses a search response once and yields one SpanRecord per hit. The
`http.response.body` tag carries the bank API's JSON reply as a string;
it is decoded here so the summary rules only deal with plain fields.

Malformed input is never fatal at this layer: a response that is not JSON
yields no records, and a hit whose body cannot be decoded yields a record
with an empty ResponseBody.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator

from banktrack.models.domain import RESPONSE_BODY_TAG, ResponseBody, SpanRecord

logger = logging.getLogger(__name__)


def as_text(value: Any) -> str:
    """Render a JSON scalar as text.

    Strings are returned as is, null becomes "", numbers and booleans use
    their JSON spelling, objects and arrays their compact JSON encoding.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, separators=(",", ":"))


def get_path(document: Any, path: str) -> tuple[bool, Any]:
    """Look up a dotted path in nested dicts.

    Returns:
        (found, value). found is False as soon as a segment is missing or
        an intermediate value is not an object.
    """
    current = document
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return False, None
        current = current[segment]
    return True, current


def text_at(document: Any, path: str) -> str:
    """Text value at a dotted path, "" when absent."""
    found, value = get_path(document, path)
    return as_text(value) if found else ""


def load_json(data: Any) -> Any:
    """Decode raw JSON text; decoded values pass through.

    Raises:
        ValueError: If text cannot be decoded.
    """
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if isinstance(data, str):
        return json.loads(data)
    return data


def _body_from_document(document: dict[str, Any]) -> ResponseBody:
    return ResponseBody(
        source_bank_id=text_at(document, "sourceAccount.bank.bankId"),
        source_bank_name=text_at(document, "sourceAccount.bank.name"),
        destination_bank_id=text_at(document, "destinationAccount.bank.bankId"),
        destination_bank_name=text_at(document, "destinationAccount.bank.name"),
        account_bank_id=text_at(document, "accountDetails.bank.bankId"),
        transaction_type=text_at(document, "transactionType"),
        transaction_date=text_at(document, "transactionDate"),
        exception_type=text_at(document, "exceptionType"),
        has_exception="exceptionType" in document,
    )


def extract_response_body(source: Any) -> ResponseBody:
    """Extract the ResponseBody of one span's `_source`.

    The first tag whose key is `http.response.body` wins. Its value is
    usually a JSON string but an already-decoded object is accepted too.

    Args:
        source: The `_source` object of a hit.

    Returns:
        Parsed body, or ResponseBody.empty() when the tag is missing or its
        value is not a JSON object.
    """
    tags = source.get("tags") if isinstance(source, dict) else None
    if not isinstance(tags, list):
        return ResponseBody.empty()

    raw_body = None
    for tag in tags:
        if isinstance(tag, dict) and tag.get("key") == RESPONSE_BODY_TAG:
            raw_body = tag.get("value")
            break

    if raw_body is None:
        return ResponseBody.empty()

    try:
        document = load_json(raw_body)
    except ValueError as e:
        logger.debug(f"Undecodable {RESPONSE_BODY_TAG} tag: {e}")
        return ResponseBody.empty()

    if not isinstance(document, dict):
        return ResponseBody.empty()

    return _body_from_document(document)


def iter_records(result: Any) -> Iterator[SpanRecord]:
    """Yield a SpanRecord for every hit of a search response.

    Args:
        result: Decoded search response, or its raw JSON text.

    Yields:
        One record per entry of `hits.hits`, in backend order.
    """
    try:
        document = load_json(result)
    except ValueError as e:
        logger.debug(f"Search response is not JSON: {e}")
        return

    found, hits = get_path(document, "hits.hits")
    if not found or not isinstance(hits, list):
        return

    for hit in hits:
        source = hit.get("_source") if isinstance(hit, dict) else None
        yield SpanRecord(
            operation_name=text_at(source, "operationName"),
            body=extract_response_body(source),
        )
