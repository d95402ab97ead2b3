"""Chatbot backend access: API-backed and demo data sources."""

from .datasource import DataSource, DataSourceFactory, build_data_source_factory

__all__ = [
    "DataSource",
    "DataSourceFactory",
    "build_data_source_factory",
]
