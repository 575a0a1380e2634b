"""Thread extractor for Reddit-style listing payloads."""

from datetime import UTC, datetime

from ..models import Thread

REDDIT_BASE_URL = "https://reddit.com"


def parse_created(value) -> datetime | None:
    """Parse `created_utc` epoch seconds, returns None if missing or bad."""
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(float(value), UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def build_permalink(permalink: str | None) -> str:
    """Absolute URL for a listing permalink ("/r/x/comments/..." or full URL)."""
    if not permalink:
        return ""
    if permalink.startswith("http"):
        return permalink
    return f"{REDDIT_BASE_URL}{permalink}"


def extract_thread(post_data: dict) -> Thread:
    """Extract a Thread from a listing item.

    Accepts both the wrapped form ({"kind": "t3", "data": {...}}) and a bare
    post dict. Missing fields fall back to empty/zero.
    """
    post = post_data.get("data", post_data) if isinstance(post_data.get("data"), dict) else post_data

    return Thread(
        title=post.get("title"),
        text=post.get("selftext", post.get("text")),
        author=post.get("author"),
        subreddit=post.get("subreddit"),
        score=post.get("score") or post.get("ups") or 0,
        comments=post.get("num_comments", post.get("comments")) or 0,
        created_at=parse_created(post.get("created_utc")) or post.get("created_at") or post.get("created"),
        permalink=build_permalink(post.get("permalink")),
    )


def extract_threads(items: list[dict]) -> list[Thread]:
    """Extract every item of a listing (skips anything that isn't a dict)."""
    return [extract_thread(item) for item in items if isinstance(item, dict)]
