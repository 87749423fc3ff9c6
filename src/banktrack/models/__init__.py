"""Data models for banktrack.

- domain: dataclasses produced by the extraction layer
- types: pydantic response models served by the API
"""
