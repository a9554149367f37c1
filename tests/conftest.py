import pytest

from src.core.config import PatcherConfig


@pytest.fixture
def pc():
    return PatcherConfig()
