"""Shared fixtures: every test starts and ends without a cached reporter DB."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from legalcite.reporters import clear_reporter_cache


@pytest.fixture(autouse=True)
def _no_cached_reporters() -> Iterator[None]:
    clear_reporter_cache()
    yield
    clear_reporter_cache()
