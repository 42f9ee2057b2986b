"""Ingestion pipeline: extraction, normalization, validation and batch persistence.

Each step is callable on its own so it can be tested without a live store.
"""
