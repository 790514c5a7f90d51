"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


def build_csv(rows: int, cols: int, delimiter: str = ",") -> str:
    """Return a delimited document with headers ``col0..`` and cells ``r<i>c<j>``."""
    lines = [delimiter.join(f"col{j}" for j in range(cols))]
    for i in range(rows):
        lines.append(delimiter.join(f"r{i}c{j}" for j in range(cols)))
    return "\n".join(lines) + "\n"


@pytest.fixture()
def make_csv() -> Callable[..., str]:
    return build_csv
