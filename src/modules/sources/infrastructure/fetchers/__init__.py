"""数据源抓取器模块。"""

from src.modules.sources.infrastructure.fetchers.agmarknet import AgmarknetFetcher
from src.modules.sources.infrastructure.fetchers.base import BaseFetcher
from src.modules.sources.infrastructure.fetchers.factory import FetcherFactory
from src.modules.sources.infrastructure.fetchers.html_table import HtmlTableFetcher
from src.modules.sources.infrastructure.fetchers.myscheme import MySchemeFetcher

__all__ = [
    "AgmarknetFetcher",
    "BaseFetcher",
    "FetcherFactory",
    "HtmlTableFetcher",
    "MySchemeFetcher",
]
