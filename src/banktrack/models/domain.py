"""Domain models for banktrack.

Pure Python dataclasses describing what the aggregation layer reads out of
a Jaeger span. They are built by banktrack.aggregation.extract and never
leave the request that created them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Jaeger tag holding the bank API reply as a JSON string
RESPONSE_BODY_TAG = "http.response.body"

# ============================================================================
# Response Body Domain
# ============================================================================


@dataclass(frozen=True)
class ResponseBody:
    """Fields read from the `http.response.body` tag of a span.

    Every string field is "" when the path is absent, so rule checks against
    a missing field simply fail. `has_exception` reflects presence of the
    `exceptionType` key, not its value.
    """

    source_bank_id: str = ""
    source_bank_name: str = ""
    destination_bank_id: str = ""
    destination_bank_name: str = ""
    account_bank_id: str = ""
    transaction_type: str = ""
    transaction_date: str = ""
    exception_type: str = ""
    has_exception: bool = False

    @classmethod
    def empty(cls) -> ResponseBody:
        """Body of a span without a readable response payload."""
        return cls()


# ============================================================================
# Span Domain
# ============================================================================


@dataclass(frozen=True)
class SpanRecord:
    """One hit of the corpus query."""

    operation_name: str = ""
    body: ResponseBody = field(default_factory=ResponseBody.empty)
