"""
Shared fixtures for fetch_builder tests.
"""
from pathlib import Path

import httpx
import pytest
import respx

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def load_testdata():
    """Read a file from testdata/ as text."""
    def _load(name: str) -> str:
        return (TESTDATA / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def transport():
    with httpx.Client() as client:
        yield client


@pytest.fixture
def mock_api():
    with respx.mock(base_url="https://api.example.com", assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def template_csv():
    with open(TESTDATA / "template.csv", "rb") as f:
        yield f
