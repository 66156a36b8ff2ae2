from __future__ import annotations

import io
from typing import Iterator

import pytest
from regex_visualiser.logging import stop_logging


@pytest.fixture
def log_output() -> Iterator[io.StringIO]:
    """A log destination to pass to ``start_logging``, unregistered after the test."""
    output = io.StringIO()
    yield output
    stop_logging()
