"""myScheme 门户抓取器。

门户是客户端渲染页面，需要通过共享浏览器打开、等待方案链接出现后再解析 DOM。
先选中每个方案的标题链接，再向上找到所在卡片，读取简介和类别。

配置格式（SourceSettings.selectors）：
{
    "link": "h2 a[href^='/schemes/']",  # 方案标题链接（必填）
    "card": "div",                       # 卡片容器标签（可选，默认 div）
    "description": "span.line-clamp-2",  # 简介（可选，相对于卡片）
    "category": "div[title]"             # 类别标签（可选，相对于卡片）
}
"""

from typing import TYPE_CHECKING
from urllib.parse import quote, urljoin

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from loguru import logger

from src.core.config import SourceSettings
from src.core.infrastructure.browser import BrowserSessionManager, ScrapeError
from src.modules.schemes.domain.entities import Scheme, SchemeQuery
from src.modules.sources.infrastructure.fetchers.base import BaseFetcher

if TYPE_CHECKING:
    from playwright.async_api import Page

DEFAULT_CARD_TAG = "div"


class MySchemeFetcher(BaseFetcher[SchemeQuery, Scheme]):
    """myScheme 列表页抓取器（浏览器渲染）。"""

    def __init__(
        self,
        source: SourceSettings,
        browser: BrowserSessionManager,
        max_items: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(source, max_items=max_items, transport=transport)
        self._browser = browser

    def validate_config(self) -> tuple[bool, str | None]:
        valid, error = super().validate_config()
        if not valid:
            return valid, error
        if not self.source.selectors.get("link"):
            return False, "Missing selectors.link in config"
        error = self._check_selectors("link", "description", "category")
        if error:
            return False, error
        return True, None

    async def fetch(self, target: SchemeQuery) -> list[Scheme] | None:
        self._ensure_valid()
        url = self.search_url(target)
        timeout_sec = self.source.timeout_ms / 1000

        async def render(page: "Page") -> str:
            await page.goto(url, wait_until="domcontentloaded")
            await page.wait_for_selector(
                self.source.selectors["link"],
                timeout=self.source.timeout_ms,
            )
            return await page.content()

        html = await self._browser.with_page(render, timeout=timeout_sec)
        schemes = self.parse(html)
        logger.debug(f"[{self.name}] Rendered {len(schemes)} schemes for {target}")
        return schemes[: self.max_items]

    def search_url(self, target: SchemeQuery) -> str:
        if not target.query:
            return self.source.url
        separator = "&" if "?" in self.source.url else "?"
        return f"{self.source.url}{separator}q={quote(target.query)}"

    def parse(self, html: str) -> list[Scheme]:
        soup = BeautifulSoup(html, "html.parser")
        links = soup.select(self.source.selectors["link"])
        if not links:
            raise ScrapeError("No scheme cards found", source_name=self.name)

        schemes: list[Scheme] = []
        for link in links:
            scheme = self._extract_scheme(link)
            if scheme is not None:
                schemes.append(scheme)
        return schemes

    def _extract_scheme(self, link: Tag) -> Scheme | None:
        selectors = self.source.selectors
        href = str(link.get("href", ""))
        name = self._clean_text(link.get_text())
        if not href or not name:
            return None

        scheme_id = href.rstrip("/").rsplit("/", 1)[-1]
        url = urljoin(self.source.url, href)
        if not self._is_allowed_url(url):
            return None

        card = link.find_parent(selectors.get("card", DEFAULT_CARD_TAG))
        return Scheme(
            id=scheme_id,
            name=name,
            description=self._select_text(card, selectors.get("description")),
            category=self._select_text(card, selectors.get("category")) or "General",
            url=url,
            source=self.name,
        )

    def _select_text(self, card: Tag | None, selector: str | None) -> str:
        if card is None or not selector:
            return ""
        element = card.select_one(selector)
        return self._clean_text(element.get_text()) if element else ""
