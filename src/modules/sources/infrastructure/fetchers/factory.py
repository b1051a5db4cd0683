"""抓取器工厂。

根据数据源 kind 创建相应的抓取器实例，并包装成数据源链使用的 SourceDescriptor。
"""

from collections.abc import Iterable
from typing import Any

import httpx
from loguru import logger

from src.core.config import SourceSettings
from src.core.infrastructure.browser import BrowserSessionManager
from src.modules.sources.domain.exceptions import (
    InvalidSourceConfigError,
    UnsupportedSourceKindError,
)
from src.modules.sources.domain.fetcher import SourceDescriptor
from src.modules.sources.infrastructure.fetchers.agmarknet import AgmarknetFetcher
from src.modules.sources.infrastructure.fetchers.base import BaseFetcher
from src.modules.sources.infrastructure.fetchers.html_table import HtmlTableFetcher
from src.modules.sources.infrastructure.fetchers.myscheme import MySchemeFetcher


class FetcherFactory:
    """抓取器工厂类。"""

    def __init__(
        self,
        browser: BrowserSessionManager,
        max_items: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._browser = browser
        self._max_items = max_items
        self._transport = transport

    def create(self, source: SourceSettings) -> BaseFetcher[Any, Any]:
        """根据源类型创建抓取器。

        Raises:
            UnsupportedSourceKindError: 不支持的源类型
            InvalidSourceConfigError: 配置无效
        """
        fetcher: BaseFetcher[Any, Any]
        if source.kind == "myscheme":
            fetcher = MySchemeFetcher(
                source,
                browser=self._browser,
                max_items=self._max_items,
                transport=self._transport,
            )
        elif source.kind == "agmarknet":
            fetcher = AgmarknetFetcher(
                source, max_items=self._max_items, transport=self._transport
            )
        elif source.kind == "html_table":
            fetcher = HtmlTableFetcher(
                source, max_items=self._max_items, transport=self._transport
            )
        else:
            raise UnsupportedSourceKindError(source.kind)

        valid, error = fetcher.validate_config()
        if not valid:
            raise InvalidSourceConfigError(source.name, error or "invalid")
        return fetcher

    def build_descriptors(
        self,
        sources: Iterable[SourceSettings],
    ) -> list[SourceDescriptor[Any, Any]]:
        """把配置表转换成数据源描述；配置无效的源记录日志后跳过。"""
        descriptors: list[SourceDescriptor[Any, Any]] = []
        for source in sources:
            try:
                fetcher = self.create(source)
            except (InvalidSourceConfigError, UnsupportedSourceKindError) as e:
                logger.warning(f"Skipping source {source.name}: {e.message}")
                continue
            descriptors.append(fetcher.to_descriptor())
        return descriptors
