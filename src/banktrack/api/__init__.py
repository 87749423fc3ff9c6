"""API module for banktrack.

- Reads path/query parameters and rejects missing ones with 400
- Calls the search backend once per request and hands the response to
  the aggregation layer
- Forbidden: counting rules, query building beyond picking a builder
"""
