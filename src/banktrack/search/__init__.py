"""Search backend adapters.

The aggregation layer only sees decoded search responses. Everything that
talks to Elasticsearch lives here:
- base: SearchBackend interface and BackendError
- queries: query bodies for the corpus and latency aggregations
- elastic: elasticsearch-py implementation
"""

from banktrack.search.base import BackendError, SearchBackend

__all__ = ["BackendError", "SearchBackend"]
