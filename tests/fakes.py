"""测试用假实现（时钟、浏览器、page）。"""

from datetime import date
from typing import Any

FIXED_TODAY = date(2025, 1, 15)


class FakeClock:
    """可手动推进的单调时钟。"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePage:
    def __init__(self, html: str = "<html></html>") -> None:
        self.html = html
        self.closed = False
        self.visited: list[str] = []

    async def goto(self, url: str, **_kwargs: Any) -> None:
        self.visited.append(url)

    async def wait_for_selector(self, _selector: str, **_kwargs: Any) -> None:
        return None

    async def content(self) -> str:
        return self.html

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, html: str = "<html></html>") -> None:
        self.html = html
        self.connected = True
        self.closed = False
        self.pages: list[FakePage] = []

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self, **_kwargs: Any) -> FakePage:
        page = FakePage(self.html)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True
        self.connected = False
