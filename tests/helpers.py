"""Test doubles shared across test modules."""

from typing import List, Optional, Set

from shortlink.exceptions import StoreUnavailableError
from shortlink.notify import NotificationSink
from shortlink.storage import KeyValueStore


SEED = {"seeded": "https://seed.example.com"}


class FailingStore(KeyValueStore):
    """Remote store that fails every call."""

    name = "failing"

    def __init__(self):
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise StoreUnavailableError("remote down")

    async def get(self, key: str) -> Optional[str]:
        self._fail()

    async def set(self, key: str, value: str) -> None:
        self._fail()

    async def set_if_absent(self, key: str, value: str) -> bool:
        self._fail()

    async def keys(self) -> Set[str]:
        self._fail()

    async def health_check(self) -> bool:
        return False

    async def close(self) -> None:
        pass


class RecordingNotifier(NotificationSink):
    """Keeps every notification text."""

    def __init__(self):
        self.messages: List[str] = []

    async def notify(self, text: str) -> None:
        self.messages.append(text)
