"""Aggregation module for transaction analytics.

Turns search responses into summaries:
- extract: shared span/response-body extraction
- summary: per-bank counts over the corpus
- traces: latency percentiles and slowest spans
- Forbidden: backend calls, HTTP concerns
"""
