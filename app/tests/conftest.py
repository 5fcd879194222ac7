"""Shared pytest fixtures.

The application package root (app/) is put on sys.path by the pytest
configuration in pyproject.toml.
"""

import pytest

from infrastructure.configuration import I18nSettings


@pytest.fixture
def i18n_settings(tmp_path):
    """I18nSettings pointing at an empty temporary messages directory."""
    return I18nSettings(
        SOURCE_LANGUAGE="en-US",
        LANGUAGE="fr-FR",
        MESSAGES_DIR=str(tmp_path / "messages"),
    )
