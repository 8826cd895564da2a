"""
Shared fixtures for palette search tests.
"""
import numpy as np
import pytest

from config import Settings
from services.product_repository import ProductRepository


@pytest.fixture
def rng():
    """Seeded generator so extraction is reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and samples folder."""
    return Settings(
        db_url=f"sqlite:///{tmp_path / 'products.db'}",
        samples_dir=str(tmp_path / "samples"),
        bot_token=None,
    )


@pytest.fixture
def repo(settings):
    return ProductRepository(settings.db_url)
