"""Shared test fixtures."""

import pytest

from threadpulse.models import Thread


@pytest.fixture
def make_thread():
    """Factory for threads with sensible defaults."""

    def _make(title: str = "", text: str = "", **overrides) -> Thread:
        base = {
            "title": title,
            "text": text,
            "author": "someone",
            "subreddit": "software",
            "score": 1,
            "comments": 0,
            "permalink": "https://reddit.com/r/software/comments/abc/",
        }
        base.update(overrides)
        return Thread(**base)

    return _make


@pytest.fixture
def rant_thread(make_thread):
    """The canonical angry post."""
    return make_thread("I hate this app, it's terrible and broken!!!")
