"""Agmarknet 抓取器。

Agmarknet 是 ASP.NET WebForms 页面：先 GET 拿到 __VIEWSTATE 等隐藏字段，
再带着品种 / 邦 / 市场 POST 回同一地址，结果表格为 #cphBody_GridView1。

结果列：S.No | City | Commodity | Min | Max | Modal | Date（价格单位：卢比/公担）
"""

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from src.core.config import SourceSettings
from src.core.infrastructure.browser.exceptions import ScrapeError
from src.modules.market.domain.entities import PriceQuery, PriceRecord
from src.modules.sources.infrastructure.fetchers.html_table import HtmlTableFetcher

HIDDEN_FIELDS = ("__VIEWSTATE", "__VIEWSTATEGENERATOR", "__EVENTVALIDATION")

GRID_COLUMNS = {
    "row": "#cphBody_GridView1 tr",
    "market": "1",
    "commodity": "2",
    "min": "3",
    "max": "4",
    "modal": "5",
    "date": "6",
    "unit": "quintal",
}


class AgmarknetFetcher(HtmlTableFetcher):
    """Agmarknet 表单抓取器。"""

    DEFAULT_UNIT = "quintal"

    def __init__(
        self,
        source: SourceSettings,
        max_items: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        source = source.model_copy(
            update={"selectors": {**GRID_COLUMNS, **source.selectors}}
        )
        super().__init__(source, max_items=max_items, transport=transport)

    async def fetch(self, target: PriceQuery) -> list[PriceRecord] | None:
        self._ensure_valid()

        try:
            async with self._client() as client:
                landing = await client.get(self.source.url)
                landing.raise_for_status()
                form = self.build_form(landing.text, target)

                response = await client.post(self.source.url, data=form)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._http_error(e) from e

        records = self.parse(response.text, target)
        logger.debug(f"[{self.name}] {len(records)} rows for {target}")
        return records[: self.max_items]

    def build_form(self, html: str, target: PriceQuery) -> dict[str, str]:
        """从落地页提取隐藏字段并拼装查询表单。"""
        soup = BeautifulSoup(html, "html.parser")
        form: dict[str, str] = {}
        for field_name in HIDDEN_FIELDS:
            element = soup.select_one(f'input[name="{field_name}"]')
            if element is None:
                if field_name == "__VIEWSTATE":
                    raise ScrapeError("Missing __VIEWSTATE", source_name=self.name)
                continue
            form[field_name] = str(element.get("value", ""))

        form.update(
            {
                "ctl00$cphBody$cboCommodity": target.commodity,
                "ctl00$cphBody$cboState": target.state,
                "ctl00$cphBody$cboMkt": target.market,
                "ctl00$cphBody$btnSubmit": "Submit",
            }
        )
        return form
