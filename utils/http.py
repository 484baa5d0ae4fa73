"""
Shared HTTP session for the single dataset request.

The session carries no retry adapter and no default timeout: a failed
fetch stays failed.

Usage::

    from utils.http import create_session

    resp = create_session().get(DATA_URL)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter

USER_AGENT = "temperature-heatmap/0.1"


def create_session() -> requests.Session:
    """Build a ``requests.Session`` with retries disabled."""
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=0)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT
    return s
