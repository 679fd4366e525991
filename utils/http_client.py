import random
from typing import List, Optional

import requests
import requests_cache

import config

# A small rotation of modern desktop user agents
USER_AGENTS: List[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
]

HEADERS = {
    "Accept": "application/json, text/csv;q=0.9, */*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}

CACHE_NAME = "http_cache"


def make_session(use_cache: bool = False, expire_after: Optional[int] = None) -> requests.Session:
    """Create a requests session for tcgcsv.com, optionally cached on disk.

    Cached responses expire after ``expire_after`` seconds, defaulting to
    ``config.CACHE_TTL``. Failed requests are not retried; callers decide
    what to do with a failed group.
    """
    if use_cache:
        session: requests.Session = requests_cache.CachedSession(
            CACHE_NAME,
            expire_after=config.CACHE_TTL if expire_after is None else expire_after,
        )
    else:
        session = requests.Session()

    session.headers.update(HEADERS)
    # Rotate user agents per session
    session.headers["User-Agent"] = random.choice(USER_AGENTS)
    return session
