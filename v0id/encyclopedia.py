"""Thin client for encyclopedia page summaries."""

import logging
from urllib.parse import quote

import requests

logger = logging.getLogger("v0id.encyclopedia")

SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{}"
USER_AGENT = "v0id/0.1 (thought loop)"


def fetch_summary(title: str, timeout: float = 10,
                  session: requests.Session | None = None) -> str | None:
    """Return the page extract for title, or None if anything goes wrong."""
    title = title.strip()
    if not title:
        return None
    url = SUMMARY_URL.format(quote(title.replace(" ", "_")))
    http = session or requests
    try:
        resp = http.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        if resp.status_code != 200:
            logger.info(f"No summary for '{title}' (HTTP {resp.status_code})")
            return None
        extract = resp.json().get("extract")
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Encyclopedia lookup failed for '{title}': {e}")
        return None
    if not isinstance(extract, str) or not extract.strip():
        return None
    return extract.strip()
