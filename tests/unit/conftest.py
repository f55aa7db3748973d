import threading
from datetime import datetime, UTC

import pytest

from tinyurl.dao.base import ShortURLBaseDAO
from tinyurl.dao.key_schema import KeySchema
from tinyurl.dao.exceptions import ShortURLNotFoundError
from tinyurl.models import ShortURLModel, InsertOutcome


class InMemoryShortURLDAO(ShortURLBaseDAO):
    """Dict-backed DAO with the same atomic dual insert semantics as the real stores."""

    def __init__(self, prefix: str | None = None):
        self.items: dict[str, dict[str, str]] = {}
        self.keys = KeySchema(prefix=prefix)
        self.insert_calls = 0
        self.get_calls = 0
        self._lock = threading.Lock()

    def insert(self, short_url: ShortURLModel, **kwargs) -> InsertOutcome:
        long_url_key = self.keys.long_url_key(short_url.target)
        short_code_key = self.keys.short_code_key(short_url.shortcode)

        with self._lock:
            self.insert_calls += 1
            if long_url_key in self.items:
                return InsertOutcome.long_url_exists(ShortURLModel.from_item(self.items[long_url_key]))
            if short_code_key in self.items:
                return InsertOutcome.short_code_exists()

            item = short_url.to_item()
            self.items[long_url_key] = dict(item)
            self.items[short_code_key] = dict(item)
        return InsertOutcome.success()

    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        with self._lock:
            self.get_calls += 1
            item = self.items.get(self.keys.short_code_key(shortcode))
        if item is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return ShortURLModel.from_item(item)


@pytest.fixture
def memory_dao() -> InMemoryShortURLDAO:
    return InMemoryShortURLDAO()


@pytest.fixture
def created_at() -> datetime:
    return datetime(2025, 10, 15, 12, 30, 45, 123000, tzinfo=UTC)
