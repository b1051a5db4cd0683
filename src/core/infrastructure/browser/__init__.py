"""共享无头浏览器会话。"""

from src.core.infrastructure.browser.exceptions import (
    BrowserUnavailableError,
    ScrapeError,
)
from src.core.infrastructure.browser.session import BrowserSessionManager

__all__ = [
    "BrowserSessionManager",
    "BrowserUnavailableError",
    "ScrapeError",
]
