"""
Shared test doubles for Motor collections.
"""

import pytest


class MockCursor:
    """Async-iterable stand-in for a Motor cursor."""

    def __init__(self, documents):
        self.documents = list(documents)
        self.sort_args = None

    def sort(self, key, direction):
        self.sort_args = (key, direction)
        self.documents.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self.documents)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture
def cursor_factory():
    """Build MockCursor instances over a list of documents."""
    return MockCursor
