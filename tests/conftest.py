"""Pytest config: PYTHONPATH, anyio backend and fake sources."""
import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))

from finder.models import ResourceRecord, SourceKind  # noqa: E402
from finder.sources.base import ResourceSource  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_records(kind: SourceKind, count: int, prefix: str = "item") -> list[ResourceRecord]:
    return [
        ResourceRecord(
            title=f"{prefix} {i}",
            url=f"https://example.com/{kind.value}/{prefix}-{i}",
            source_kind=kind,
        )
        for i in range(1, count + 1)
    ]


class FakeSource(ResourceSource):
    """In-memory source: returns records or raises, optionally after a delay."""

    def __init__(
        self,
        kind: SourceKind,
        records: Optional[list[ResourceRecord]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        missing: Optional[str] = None,
    ):
        self.kind = kind
        self.name = f"fake-{kind.value}"
        self._records = records or []
        self._error = error
        self._delay = delay
        self._missing = missing
        self.calls: list[tuple[str, int]] = []

    def missing_config(self) -> Optional[str]:
        return self._missing

    async def fetch_resources(self, topic: str, limit: int) -> list[ResourceRecord]:
        self.calls.append((topic, limit))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._records)


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def records():
    return make_records
