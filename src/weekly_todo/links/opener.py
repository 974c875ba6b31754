# src/weekly_todo/links/opener.py

from __future__ import annotations

import logging
import webbrowser

logger = logging.getLogger(__name__)


class WebBrowserOpener:
    """UrlOpener backed by the standard webbrowser module."""

    def open(self, url: str, *, new_context: bool) -> bool:
        try:
            # new=2: new tab (separate context); new=0: same window if possible.
            opened = webbrowser.open(url, new=2 if new_context else 0)
        except webbrowser.Error:
            logger.exception("Failed to open %s", url)
            return False
        if not opened:
            logger.warning("No browser available to open %s", url)
        return bool(opened)


class PrintOpener:
    """UrlOpener that only reports the URL (WEEKLY_TODO_OPEN_LINKS=false)."""

    def __init__(self, emit=print) -> None:
        self._emit = emit

    def open(self, url: str, *, new_context: bool) -> bool:
        self._emit(f"Link: {url}")
        return True
