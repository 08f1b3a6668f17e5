from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from emojimash._transport import FetchedDocument
from emojimash.archive import DocumentArchive
from emojimash.refresh import RefreshCoordinator
from emojimash.service import ResolutionService
from emojimash.store import MappingStore

METADATA_URL = "https://example.invalid/metadata.json"


def make_document(combinations: Iterable[tuple[str, str, str]]) -> bytes:
    """Build an upstream-shaped document grouping each combo under its left emoji."""
    data: dict[str, Any] = {}
    for left, right, url in combinations:
        entry = data.setdefault(
            f"code-{left}",
            {"alt": "", "keywords": [], "emoji": left, "emojiCodepoint": "", "gBoardOrder": 0, "combinations": {}},
        )
        entry["combinations"].setdefault(f"code-{right}", []).append(
            {
                "gStaticUrl": url,
                "alt": f"{left}-{right}",
                "leftEmoji": left,
                "leftEmojiCodepoint": "",
                "rightEmoji": right,
                "rightEmojiCodepoint": "",
                "date": "20230301",
                "isLatest": True,
                "gBoardOrder": 0,
            }
        )
    return json.dumps({"knownSupportedEmoji": [], "data": data}, ensure_ascii=False).encode("utf-8")


@dataclass
class FakeMetadataBackend:
    body: bytes = b""
    status: int = 200
    error: Exception | None = None
    gate: asyncio.Event | None = None
    hang: bool = False
    calls: int = 0
    urls: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> FetchedDocument:
        self.calls += 1
        self.urls.append(url)
        if self.hang:
            await asyncio.Event().wait()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FetchedDocument(status=self.status, body=self.body)


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)


SAMPLE_COMBINATIONS = [
    ("😀", "😂", "http://x/1.png"),
    ("😀", "😎", "http://x/2.png"),
    ("🐱", "🔥", "http://x/3.png"),
]


@pytest.fixture
def sample_body() -> bytes:
    return make_document(SAMPLE_COMBINATIONS)


@pytest.fixture
def backend(sample_body: bytes) -> FakeMetadataBackend:
    return FakeMetadataBackend(body=sample_body)


@pytest.fixture
def archive(tmp_path: Path) -> DocumentArchive:
    return DocumentArchive(tmp_path / "data" / "metadata.json")


@pytest.fixture
def store() -> MappingStore:
    return MappingStore()


@pytest.fixture
def coordinator(store: MappingStore, backend: FakeMetadataBackend, archive: DocumentArchive) -> RefreshCoordinator:
    return RefreshCoordinator(store, backend, archive, url=METADATA_URL)


@pytest.fixture
def service(store: MappingStore, coordinator: RefreshCoordinator) -> ResolutionService:
    return ResolutionService(store, coordinator)
