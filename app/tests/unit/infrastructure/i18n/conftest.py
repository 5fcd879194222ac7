"""Feature-level fixtures for i18n system tests.

Provides message sources, formatters and YAML catalogs for translation
scenarios.
"""

from unittest.mock import MagicMock

import pytest
import yaml

from infrastructure.i18n import Translator
from tests.factories.i18n import (
    RecordingFormatter,
    StubMessageSource,
    make_catalog_source,
)


@pytest.fixture
def french_source():
    """CatalogMessageSource with French translations for the "app" category."""
    return make_catalog_source()


@pytest.fixture
def translator(french_source):
    """Translator with a single "app" category."""
    return Translator({"app": french_source})


@pytest.fixture
def recording_formatter():
    """Formatter returning "formatted" and recording its calls."""
    return RecordingFormatter()


@pytest.fixture
def stub_source():
    """Message source that never finds a translation."""
    return StubMessageSource(translation=None, source_language="de-DE")


@pytest.fixture
def counting_factory():
    """Object factory building a new StubMessageSource per call."""
    return MagicMock(side_effect=lambda config: StubMessageSource())


@pytest.fixture
def messages_dir(tmp_path):
    """Create a directory of YAML catalogs.

    Returns a directory structure like:
    - fr/app.yml
    - fr-FR/app.yml
    - fr-FR/billing/errors.yml
    """
    (tmp_path / "fr").mkdir()
    (tmp_path / "fr-FR" / "billing").mkdir(parents=True)

    with open(tmp_path / "fr" / "app.yml", "w", encoding="utf-8") as f:
        yaml.dump(
            {
                "Hello {name}": "Salut {name}",
                "Goodbye": "Au revoir",
            },
            f,
            allow_unicode=True,
        )

    with open(tmp_path / "fr-FR" / "app.yml", "w", encoding="utf-8") as f:
        yaml.dump({"Hello {name}": "Bonjour {name}"}, f, allow_unicode=True)

    with open(tmp_path / "fr-FR" / "billing" / "errors.yml", "w", encoding="utf-8") as f:
        yaml.dump({"Card declined": "Carte refusée"}, f, allow_unicode=True)

    return tmp_path
