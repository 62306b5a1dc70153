"""Metric loading, configuration and data quality helpers."""
