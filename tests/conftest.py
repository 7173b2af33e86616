"""Shared pytest fixtures."""

import pytest
from pathlib import Path

from tsbind.config import ExportConfiguration


@pytest.fixture
def examples_dir():
    """Path to tests/examples/ containing schema files."""
    return Path(__file__).parent / "examples"


@pytest.fixture(params=["users.yaml", "shapes.yaml", "events.json"])
def example_file(examples_dir, request):
    """Parametrized: one of the example schema files."""
    return examples_dir / request.param


@pytest.fixture
def conf():
    """Default configuration: bigints forbidden, JSDoc comments."""
    return ExportConfiguration()
