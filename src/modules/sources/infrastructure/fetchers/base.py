"""抓取器基类定义。

提供统一的抓取接口，所有具体抓取器（myScheme / Agmarknet / HTML 表格）都继承此基类。
抓取器只负责"拿数据 + 解析"，失败直接抛 ScrapeError，由数据源链负责降级。
"""

import re
from abc import ABC, abstractmethod
from ipaddress import ip_address
from typing import Generic, TypeVar
from urllib.parse import urlparse

import httpx
import soupsieve

from src.core.config import SourceSettings, settings
from src.core.infrastructure.browser.exceptions import ScrapeError
from src.modules.sources.domain.fetcher import SourceDescriptor

TargetT = TypeVar("TargetT")
RecordT = TypeVar("RecordT")

_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


class BaseFetcher(ABC, Generic[TargetT, RecordT]):
    """抓取器基类。

    所有具体抓取器都应继承此基类并实现 fetch 方法。
    """

    def __init__(
        self,
        source: SourceSettings,
        max_items: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化抓取器。

        Args:
            source: 数据源配置
            max_items: 单次抓取最大条目数，不指定则使用默认配置
            transport: 自定义 httpx transport（测试用）
        """
        self.source = source
        self.max_items = max_items or settings.ITEMS_PER_SOURCE_PER_FETCH
        self._transport = transport

    @property
    def name(self) -> str:
        return self.source.name

    @abstractmethod
    async def fetch(self, target: TargetT) -> list[RecordT] | None:
        """执行抓取操作。

        Raises:
            ScrapeError: 抓取或解析失败
        """
        pass

    def validate_config(self) -> tuple[bool, str | None]:
        """验证配置是否有效。

        Returns:
            (是否有效, 错误信息)
        """
        if not self.source.url:
            return False, "Missing url in config"
        if not self._is_allowed_url(self.source.url):
            return False, "url must be a public HTTP(S) URL"
        return True, None

    def to_descriptor(self) -> SourceDescriptor[TargetT, RecordT]:
        return SourceDescriptor(
            name=self.source.name,
            priority=self.source.priority,
            fetch=self.fetch,
            enabled=self.source.enabled,
            timeout_ms=self.source.timeout_ms,
        )

    def _check_selectors(self, *names: str) -> str | None:
        """预编译 CSS 选择器，返回第一个无效选择器的错误信息。"""
        for name in names:
            selector = self.source.selectors.get(name)
            if not selector:
                continue
            try:
                soupsieve.compile(selector)
            except soupsieve.SelectorSyntaxError as e:
                return f"selectors.{name} is not a valid CSS selector: {e}"
        return None

    def _ensure_valid(self) -> None:
        valid, error = self.validate_config()
        if not valid:
            raise ScrapeError(error or "Invalid config", source_name=self.name)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.source.timeout_ms / 1000,
            follow_redirects=True,
            headers=self._default_headers(),
            transport=self._transport,
        )

    def _default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": settings.FETCHER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": settings.FETCHER_ACCEPT_LANGUAGE,
        }

    def _clean_text(self, text: str | None) -> str:
        """清理文本中的多余空白。"""
        if not text:
            return ""
        return " ".join(text.split())

    def _parse_number(self, text: str | None) -> float | None:
        """从 "₹ 1,520.50" 之类的文本中提取数字。"""
        if not text:
            return None
        match = _NUMBER_PATTERN.search(text.replace(",", ""))
        return float(match.group(0)) if match else None

    def _http_error(self, e: httpx.HTTPError) -> ScrapeError:
        if isinstance(e, httpx.TimeoutException):
            return ScrapeError(f"Timeout: {e}", source_name=self.name)
        if isinstance(e, httpx.HTTPStatusError):
            return ScrapeError(
                f"HTTP {e.response.status_code}", source_name=self.name
            )
        return ScrapeError(f"Error: {e}", source_name=self.name)

    def _is_allowed_url(self, url: str) -> bool:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            return False
        host = parsed.hostname
        if not host:
            return False
        if host in {"localhost"}:
            return False
        if host.endswith((".local", ".internal")):
            return False
        try:
            ip_value = ip_address(host)
        except ValueError:
            return True
        if (
            ip_value.is_private
            or ip_value.is_loopback
            or ip_value.is_link_local
            or ip_value.is_reserved
            or ip_value.is_multicast
        ):
            return False
        return True
