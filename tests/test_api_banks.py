"""Tests for per-bank API endpoints."""

from banktrack.models.types import ErrorResponse
from banktrack.search.base import BackendError
from spans import hit, search_result, transaction

ALPHA = ("B1", "Alpha Bank")
BETA = ("B2", "Beta Bank")


def corpus():
    return search_result(
        hit(transaction(source=ALPHA, destination=BETA, account="B1",
                        transaction_type="TRANSFER", date="2024-07-21T10:00:00Z")),
        hit(transaction(destination=ALPHA, account="B1", transaction_type="DEPOSIT",
                        date="2024-07-22T09:30:00Z")),
        hit(transaction(account="B1", exceptionType="InsufficientFundsException")),
        hit(None),
    )


class TestTotalEndpoint:
    """Test GET /bank/{bank_id}/transactions/total."""

    def test_returns_scalar_total(self, client, fake_backend):
        fake_backend.corpus = corpus()
        response = client.get("/bank/B1/transactions/total")

        assert response.status_code == 200
        assert response.json() == 3

    def test_unknown_bank_zero(self, client, fake_backend):
        fake_backend.corpus = corpus()
        assert client.get("/bank/B9/transactions/total").json() == 0


class TestCountEndpoint:
    """Test GET /bank/{bank_id}/transactions/count."""

    def test_returns_count_summary(self, client, fake_backend):
        fake_backend.corpus = corpus()
        response = client.get("/bank/B1/transactions/count")

        assert response.status_code == 200
        assert response.json() == {"Alpha Bank": {"TRANSFER": 1, "DEPOSIT": 1}}

    def test_queries_backend_once(self, client, fake_backend):
        client.get("/bank/B1/transactions/count")
        assert fake_backend.corpus_calls == 1


class TestTransferEndpoint:
    """Test GET /bank/{bank_id}/transactions/count/transfer."""

    def test_returns_directional_counts(self, client, fake_backend):
        fake_backend.corpus = corpus()
        response = client.get("/bank/B1/transactions/count/transfer")

        assert response.status_code == 200
        assert response.json() == {"Beta Bank (to)": {"TRANSFER": 1}}

    def test_incoming_side(self, client, fake_backend):
        fake_backend.corpus = corpus()
        assert client.get("/bank/B2/transactions/count/transfer").json() == {
            "Alpha Bank (from)": {"TRANSFER": 1}
        }


class TestDateCountEndpoint:
    """Test GET /bank/{bank_id}/transactions/date/count."""

    def test_returns_window_counts_with_echo(self, client, fake_backend):
        fake_backend.corpus = corpus()
        response = client.get(
            "/bank/B1/transactions/date/count",
            params={"start": "2024-07-21", "end": "2024-07-21"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "transactionCount": {"Alpha Bank": {"TRANSFER": 1}},
            "bankID": "B1",
            "startDate": "2024-07-21",
            "endDate": "2024-07-21",
        }

    def test_missing_start_is_400(self, client, fake_backend):
        response = client.get("/bank/B1/transactions/date/count", params={"end": "2024-07-22"})

        assert response.status_code == 400
        assert response.json() == {"error": "BankID, start date, and end date are required"}
        assert fake_backend.corpus_calls == 0

    def test_missing_end_is_400(self, client, fake_backend):
        response = client.get("/bank/B1/transactions/date/count", params={"start": "2024-07-20"})
        assert response.status_code == 400
        assert fake_backend.corpus_calls == 0

    def test_empty_start_is_400(self, client):
        response = client.get(
            "/bank/B1/transactions/date/count", params={"start": "", "end": "2024-07-22"}
        )
        assert response.status_code == 400


class TestExceptionEndpoint:
    """Test GET /bank/{bank_id}/transactions/exception."""

    def test_returns_exception_counts(self, client, fake_backend):
        fake_backend.corpus = corpus()
        response = client.get("/bank/B1/transactions/exception")

        assert response.status_code == 200
        assert response.json() == {"InsufficientFundsException": 1}


class TestBankEndpointErrors:
    """Test error mapping shared by the bank endpoints."""

    def test_backend_error_is_500(self, client, fake_backend):
        fake_backend.error = BackendError(
            reason="no such index", status=404, error_type="index_not_found_exception"
        )
        response = client.get("/bank/B1/transactions/count")

        assert response.status_code == 500
        assert response.json() == {"error": "[404] index_not_found_exception: no such index"}

    def test_transport_error_is_500(self, client, fake_backend):
        fake_backend.error = BackendError(reason="connection refused", error_type="ConnectionError")
        response = client.get("/bank/B1/transactions/total")

        assert response.status_code == 500
        assert response.json() == {"error": "ConnectionError: connection refused"}

    def test_blank_bank_id_is_400(self, client, fake_backend):
        response = client.get("/bank/%20/transactions/count")

        assert response.status_code == 400
        assert "error" in response.json()
        assert fake_backend.corpus_calls == 0

    def test_error_envelope_declared_in_openapi(self, client):
        operation = client.app.openapi()["paths"]["/bank/{bank_id}/transactions/count"]["get"]

        for status in ("400", "500"):
            schema = operation["responses"][status]["content"]["application/json"]["schema"]
            assert schema == {"$ref": "#/components/schemas/ErrorResponse"}

    def test_error_body_matches_envelope(self, client):
        body = client.get("/bank/%20/transactions/count").json()
        assert ErrorResponse.model_validate(body).error == "bankID is required in the URL path"
