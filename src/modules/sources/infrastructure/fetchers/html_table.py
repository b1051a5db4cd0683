"""HTML 价格表抓取器。

GET 一个页面，按行选择器解析价格表（NCDEX / MCX / Data.gov.in 等）。

配置格式（SourceSettings.selectors）：
{
    "row": "table.price-table tr",   # 行选择器（必填）
    "commodity": "0",                 # 各列下标（可选，默认如下）
    "market": "1",
    "min": "2",
    "max": "3",
    "modal": "4",
    "date": "5",
    "unit": "kg"                      # kg 或 quintal（quintal 会换算成每公斤）
}
"""

import time
from datetime import date, datetime

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from loguru import logger

from src.core.infrastructure.browser.exceptions import ScrapeError
from src.modules.market.domain.entities import PriceQuery, PriceRecord
from src.modules.market.domain.price_model import local_today, round_half_up
from src.modules.sources.infrastructure.fetchers.base import BaseFetcher

KG_PER_QUINTAL = 100

DEFAULT_COLUMNS: dict[str, int] = {
    "commodity": 0,
    "market": 1,
    "min": 2,
    "max": 3,
    "modal": 4,
    "date": 5,
}

DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%d",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
)


class HtmlTableFetcher(BaseFetcher[PriceQuery, PriceRecord]):
    """通用价格表抓取器。"""

    DEFAULT_UNIT = "kg"

    def validate_config(self) -> tuple[bool, str | None]:
        valid, error = super().validate_config()
        if not valid:
            return valid, error
        if not self.source.selectors.get("row"):
            return False, "Missing selectors.row in config"
        error = self._check_selectors("row")
        if error:
            return False, error
        for column in DEFAULT_COLUMNS:
            value = self.source.selectors.get(column)
            if value is not None and not value.isdigit():
                return False, f"selectors.{column} must be a column index"
        return True, None

    async def fetch(self, target: PriceQuery) -> list[PriceRecord] | None:
        self._ensure_valid()
        start_time = time.time()

        try:
            async with self._client() as client:
                response = await client.get(self.source.url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._http_error(e) from e

        records = self.parse(response.text, target)
        logger.debug(
            f"[{self.name}] Parsed {len(records)} price rows for {target} "
            f"in {int((time.time() - start_time) * 1000)}ms"
        )
        return records[: self.max_items]

    def parse(self, html: str, target: PriceQuery) -> list[PriceRecord]:
        """解析价格表，只保留目标品种、目标市场的行（无市场列时不按市场过滤）。"""
        soup = BeautifulSoup(html, "html.parser")
        rows = soup.select(self.source.selectors["row"])
        if not rows:
            raise ScrapeError("Price table not found", source_name=self.name)
        columns = self._columns()

        records: list[PriceRecord] = []
        for row in rows:
            cells = row.find_all("td")
            if len(cells) <= max(columns.values()):
                continue  # 表头或不完整行
            try:
                record = self._row_to_record(cells, columns, target)
            except ValueError as e:
                logger.debug(f"[{self.name}] Skipping malformed row: {e}")
                continue
            if record is not None:
                records.append(record)

        return records

    def _columns(self) -> dict[str, int]:
        return {
            column: int(self.source.selectors.get(column, str(index)))
            for column, index in DEFAULT_COLUMNS.items()
        }

    def _unit_divisor(self) -> int:
        unit = self.source.selectors.get("unit", self.DEFAULT_UNIT).lower()
        return KG_PER_QUINTAL if unit == "quintal" else 1

    def _row_to_record(
        self,
        cells: list[Tag],
        columns: dict[str, int],
        target: PriceQuery,
    ) -> PriceRecord | None:
        def cell(column: str) -> str:
            return self._clean_text(cells[columns[column]].get_text())

        commodity = cell("commodity")
        if target.commodity.lower() not in commodity.lower():
            return None
        market = cell("market")
        if market and target.market.lower() not in market.lower():
            return None  # 同表中其他市场的行

        divisor = self._unit_divisor()
        prices = []
        for column in ("min", "max", "modal"):
            value = self._parse_number(cell(column))
            if value is None:
                raise ValueError(f"missing {column} price")
            prices.append(round_half_up(value / divisor))
        min_price, max_price, modal_price = prices

        # 构造时校验 min <= modal <= max，不满足抛 ValueError
        return PriceRecord(
            date=self._parse_date(cell("date")),
            min_price=min_price,
            max_price=max_price,
            modal_price=modal_price,
            commodity=target.commodity,
            market=market or target.market,
            state=target.state,
            source_tag=self.name,
        )

    def _parse_date(self, text: str) -> date:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return local_today()
