"""
gif.land catalog client and selection helpers.

The catalog is fetched fresh for every slash command (GET https://gif.land/api,
a JSON array of GIF records). Nothing is cached between requests.
"""

import random
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from logger_util import get_logger, log

_logger = get_logger()

SITE_URL = "https://gif.land"
CATALOG_URL = f"{SITE_URL}/api"
CATALOG_TIMEOUT_SECONDS = 10


class CatalogUnavailableError(Exception):
    """Raised when the catalog cannot be fetched or is not a JSON array."""


@dataclass(frozen=True)
class Gif:
    """One catalog entry. Only url and tags are used when building messages."""

    url: str
    tags: str = ""
    id: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_dict(cls, record: dict) -> Optional["Gif"]:
        """Parse a catalog record; returns None when it has no usable url."""
        url = record.get("url")
        if not isinstance(url, str) or not url:
            return None
        tags = record.get("tags")
        return cls(
            url=url,
            tags=tags if isinstance(tags, str) else "",
            id=record.get("id") or 0,
            width=record.get("width") or 0,
            height=record.get("height") or 0,
        )


def fetch_gifs(session: Any = requests) -> List[Gif]:
    """
    Fetch the full catalog in a single request (no retry).

    Args:
        session: Object with a requests-compatible get() (module or Session)

    Returns:
        List of Gif entries, in catalog order

    Raises:
        CatalogUnavailableError: On transport error, non-2xx status or malformed body
    """
    try:
        response = session.get(CATALOG_URL, timeout=CATALOG_TIMEOUT_SECONDS)
        response.raise_for_status()
        records = response.json()
    except requests.RequestException as e:
        raise CatalogUnavailableError(f"Failed to fetch GIFs: {e}") from e
    except ValueError as e:
        raise CatalogUnavailableError(f"Catalog response is not JSON: {e}") from e

    if not isinstance(records, list):
        raise CatalogUnavailableError("Catalog response is not a JSON array")

    gifs = []
    skipped = 0
    for record in records:
        gif = Gif.from_dict(record) if isinstance(record, dict) else None
        if gif is None:
            skipped += 1
            continue
        gifs.append(gif)

    if skipped:
        log(_logger, "WARN", "catalog_records_skipped", {"skipped": skipped, "kept": len(gifs)})
    return gifs


def search_gifs(gifs: List[Gif], query: str) -> List[Gif]:
    """Return gifs whose tags or url contain query, case-insensitively."""
    needle = query.lower()
    return [g for g in gifs if needle in g.tags.lower() or needle in g.url.lower()]


def pick_random(gifs: List[Gif], rng: Optional[random.Random] = None) -> Optional[Gif]:
    """Pick one gif uniformly at random; None for an empty catalog."""
    if not gifs:
        return None
    return (rng or random).choice(gifs)


def shuffled(gifs: List[Gif], rng: Optional[random.Random] = None) -> List[Gif]:
    """Return a uniformly shuffled copy."""
    result = list(gifs)
    (rng or random).shuffle(result)
    return result
