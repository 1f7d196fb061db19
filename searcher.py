"""searcher.py

Thin client for SerpAPI's Google Images search, used to find memes.

Features:
- Centralized config (URL, API key, safe-search, HTTP timeout)
- Over-fetches 2x the requested count, filters obvious non-memes, shuffles
- Never raises to the caller: HTTP and payload problems are logged and an
  empty list is returned (the dispatcher treats that as a soft miss)

search() is synchronous (requests); the dispatcher runs it in a thread.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from core.signals import ContentItem
from utils.errors import SearchError, log_error
from utils.i18n import t
from utils.logging import log, log_warn

# -------------------------
# Defaults
# -------------------------

DEFAULT_SERPAPI_URL = "https://serpapi.com/search.json"

# Candidates fetched per requested meme, to leave room for filtering
OVERFETCH_FACTOR = 2

# Substrings that mark a result as "probably not a meme"
_URL_BLOCKLIST: tuple[str, ...] = ("logo",)
_TITLE_BLOCKLIST: tuple[str, ...] = ("download",)


@dataclass(frozen=True)
class SerpApiConfig:
    api_key: str
    url: str = DEFAULT_SERPAPI_URL
    safe: str = "active"
    timeout_s: int = 20


class MemeSearcher:
    """Image search for `<subject> meme` via SerpAPI."""

    def __init__(
        self,
        config: SerpApiConfig,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self._session = session or requests.Session()
        self._rng = rng or random.Random()

    def search(self, query: str, count: int = 5) -> List[ContentItem]:
        """Return up to `count` meme images about `query` (may be empty)."""
        subject = (query or "").strip()
        if not subject or count < 1:
            return []

        log(f"[Search] Searching {count} meme(s) for '{subject}'")
        try:
            data = self._fetch(self._params(subject, count))
        except SearchError as e:
            log_error(f"[Search] Search for '{subject}' failed: {e}", e.cause)
            return []

        items = select_memes(data, subject, count, rng=self._rng)
        if items:
            log(f"[Search] Found {len(items)} meme(s) for '{subject}'")
        else:
            log_warn(f"[Search] No usable results for '{subject}'")
        return items

    def _params(self, subject: str, count: int) -> Dict[str, Any]:
        return {
            "engine": "google",
            "q": t("search.query", subject=subject),
            "tbm": "isch",  # image search
            "ijn": "0",  # first page
            "safe": self.config.safe,
            "num": count * OVERFETCH_FACTOR,
            "api_key": self.config.api_key,
        }

    def _fetch(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            resp = self._session.get(self.config.url, params=dict(params), timeout=self.config.timeout_s)
        except requests.RequestException as e:
            raise SearchError(f"Failed to reach SerpAPI: {e}", cause=e) from e

        if resp.status_code != 200:
            raise SearchError(f"SerpAPI error {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SearchError("SerpAPI returned invalid JSON", cause=e) from e

        if not isinstance(data, dict):
            raise SearchError("SerpAPI returned an unexpected payload")
        if data.get("error"):
            raise SearchError(f"SerpAPI: {data['error']}")
        return data


def select_memes(
    data: Mapping[str, Any],
    subject: str,
    count: int,
    *,
    rng: Optional[random.Random] = None,
) -> List[ContentItem]:
    """Turn a SerpAPI payload into at most `count` shuffled ContentItems."""
    results = data.get("images_results") or []
    if not isinstance(results, list):
        return []

    candidates: List[ContentItem] = []
    for result in results[: count * OVERFETCH_FACTOR]:
        if not isinstance(result, dict):
            continue
        url = str(result.get("original") or "").strip()
        title = str(result.get("title") or "").strip() or t("search.title", subject=subject)
        if not url:
            continue
        if any(bad in url.lower() for bad in _URL_BLOCKLIST):
            continue
        if any(bad in title.lower() for bad in _TITLE_BLOCKLIST):
            continue
        candidates.append(ContentItem(url=url, title=title, source=result.get("source") or None))

    (rng or random).shuffle(candidates)
    return candidates[:count]
