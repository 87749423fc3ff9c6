"""Pydantic models for the banktrack API.

Field names are snake_case in Python and serialized with the camelCase
aliases that existing dashboards consume.
"""

from pydantic import BaseModel, ConfigDict, Field

# bank name -> transaction type -> count
CountSummary = dict[str, dict[str, int]]

# "<bank> (to)" / "<bank> (from)" -> "TRANSFER" -> count
TransferSummary = dict[str, dict[str, int]]

# exception type -> count
ExceptionSummary = dict[str, int]


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PercentileValues(_AliasedModel):
    """Latency percentiles in milliseconds."""

    p50: float
    p75: float
    p90: float
    p95: float
    p99: float


class OperationPercentiles(_AliasedModel):
    """Latency percentiles for one operation.

    transaction_count is the hit total of the whole query, shared by every
    operation in the response.
    """

    operation_name: str = Field(alias="operationName")
    transaction_count: int = Field(alias="transactionCount")
    percentiles: PercentileValues


class SlowTransaction(_AliasedModel):
    """A single slow span, duration formatted like "12.34ms"."""

    operation_name: str = Field(alias="operationName")
    duration: str


# operation name -> slowest spans, slowest first
SlowTransactionSummary = dict[str, list[SlowTransaction]]


class BetweenBanksCount(_AliasedModel):
    """Number of successful transactions between two banks."""

    transaction_count: int = Field(alias="transactionCount")
    from_bank_id: str = Field(alias="fromBankID")
    to_bank_id: str = Field(alias="toBankID")


class DateRangeCount(_AliasedModel):
    """Per-bank, per-type counts for a date window."""

    transaction_count: CountSummary = Field(alias="transactionCount")
    bank_id: str = Field(alias="bankID")
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")


class ErrorResponse(BaseModel):
    """Error envelope returned on 4xx/5xx."""

    error: str


# OpenAPI declaration of the error envelope, shared by all routers
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
