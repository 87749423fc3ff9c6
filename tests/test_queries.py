"""Tests for search request bodies."""

from banktrack.search.queries import (
    TRANSACTION_OPERATIONS,
    corpus_query,
    percentiles_query,
    slowest_query,
)


class TestCorpusQuery:
    """Test the fixed corpus query."""

    def test_matches_all_six_operations(self):
        should = corpus_query("java-bank-api")["query"]["bool"]["must"][0]["bool"]["should"]
        assert [c["match"]["operationName"] for c in should] == list(TRANSACTION_OPERATIONS)
        assert len(should) == 6

    def test_filters_service_name(self):
        must = corpus_query("other-api")["query"]["bool"]["must"]
        assert {"match": {"process.serviceName": "other-api"}} in must

    def test_requires_response_body_tag(self):
        nested = corpus_query("java-bank-api")["query"]["bool"]["must"][2]["nested"]
        assert nested["path"] == "tags"
        assert nested["query"]["bool"]["must"] == [{"match": {"tags.key": "http.response.body"}}]

    def test_fixed_result_window(self):
        body = corpus_query("java-bank-api")
        assert body["from"] == 0
        assert body["size"] == 1000
        assert body["_source"] == ["operationName", "tags"]

    def test_custom_result_window(self):
        assert corpus_query("java-bank-api", size=50)["size"] == 50

    def test_returns_fresh_dict(self):
        first = corpus_query("java-bank-api")
        first["size"] = 1
        assert corpus_query("java-bank-api")["size"] == 1000


class TestAggregationQueries:
    """Test percentile and slowest aggregation bodies."""

    def test_percentiles_shape(self):
        body = percentiles_query("java-bank-api")
        agg = body["aggs"]["by_operation"]
        assert body["size"] == 0
        assert agg["terms"]["field"] == "operationName"
        assert agg["aggs"]["load_time_percentiles"]["percentiles"] == {
            "field": "duration",
            "percents": [50, 75, 90, 95, 99],
        }

    def test_slowest_shape(self):
        body = slowest_query("java-bank-api")
        top_hits = body["aggs"]["by_endpoint"]["aggs"]["top_slow_transactions"]["top_hits"]
        assert top_hits["size"] == 5
        assert top_hits["sort"] == [{"duration": {"order": "desc"}}]

    def test_aggregations_filter_service(self):
        for body in (percentiles_query("svc"), slowest_query("svc")):
            assert {"match": {"process.serviceName": "svc"}} in body["query"]["bool"]["filter"]
