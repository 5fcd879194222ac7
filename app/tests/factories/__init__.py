"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    RecordingFormatter,
    StubMessageSource,
    make_catalog_source,
    make_catalogs,
    make_failing_formatter,
)

__all__ = [
    "RecordingFormatter",
    "StubMessageSource",
    "make_catalog_source",
    "make_catalogs",
    "make_failing_formatter",
]
