"""LLM output store: ingestion pipeline, record store and read API.

Agent output is extracted, normalized and persisted item by item, then
served back through the content endpoints.
"""
