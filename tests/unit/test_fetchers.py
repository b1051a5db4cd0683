"""抓取器单元测试。

HTTP 数据源通过 httpx.MockTransport 模拟，浏览器数据源通过假浏览器模拟。
"""

from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest

from src.core.config import DEFAULT_SCHEME_SOURCES, SourceSettings
from src.core.infrastructure.browser import BrowserSessionManager, ScrapeError
from src.modules.market.domain.entities import PriceQuery
from src.modules.sources.domain.exceptions import (
    InvalidSourceConfigError,
    UnsupportedSourceKindError,
)
from src.modules.sources.infrastructure.fetchers import (
    AgmarknetFetcher,
    FetcherFactory,
    HtmlTableFetcher,
    MySchemeFetcher,
)
from src.modules.schemes.domain.entities import SchemeQuery
from tests.fakes import FakeBrowser

pytestmark = pytest.mark.anyio

TOMATO = PriceQuery(commodity="Tomato", state="Karnataka", market="Bangalore")

PRICE_TABLE_HTML = """
<html><body>
<table class="price-table">
  <tr><th>Commodity</th><th>Market</th><th>Min</th><th>Max</th><th>Modal</th><th>Date</th></tr>
  <tr><td>Tomato (Hybrid)</td><td>Bangalore</td><td>₹ 28</td><td>₹ 36</td><td>₹ 32</td><td>14/01/2025</td></tr>
  <tr><td>Onion</td><td>Bangalore</td><td>20</td><td>26</td><td>23</td><td>14/01/2025</td></tr>
  <tr><td>Tomato</td><td>Kolar</td><td>n/a</td><td>n/a</td><td>n/a</td><td>14/01/2025</td></tr>
  <tr><td>Tomato</td><td>Mysore</td><td>30</td><td>38</td><td>34</td><td>14/01/2025</td></tr>
  <tr><td>Tomato</td><td>Bangalore APMC</td><td>27</td><td>35</td><td>31</td><td>2025-01-13</td></tr>
</table>
</body></html>
"""

AGMARKNET_LANDING_HTML = """
<form>
  <input type="hidden" name="__VIEWSTATE" value="vs-token" />
  <input type="hidden" name="__VIEWSTATEGENERATOR" value="gen" />
  <input type="hidden" name="__EVENTVALIDATION" value="ev-token" />
</form>
"""

AGMARKNET_RESULT_HTML = """
<table id="cphBody_GridView1">
  <tr><th>S.No</th><th>City</th><th>Commodity</th><th>Min</th><th>Max</th><th>Modal</th><th>Date</th></tr>
  <tr><td>1</td><td>Bangalore</td><td>Tomato</td><td>2,500</td><td>3,600</td><td>3,050</td><td>14 Jan 2025</td></tr>
</table>
"""

MYSCHEME_HTML = """
<html><body>
  <div><h2><a href="/schemes/pmksy">PM Krishi Sinchai Yojana</a></h2>
    <span class="line-clamp-2">Per drop more crop</span>
    <div title="Irrigation">Irrigation</div></div>
  <div><h2><a href="/schemes/kcc/">  Kisan   Credit Card </a></h2></div>
</body></html>
"""


def table_source(**overrides) -> SourceSettings:
    options = {
        "name": "NCDEX",
        "kind": "html_table",
        "url": "https://prices.example.com/live",
        "enabled": True,
        "selectors": {"row": "table.price-table tr"},
    }
    options.update(overrides)
    return SourceSettings(**options)


def agmarknet_source() -> SourceSettings:
    return SourceSettings(
        name="Agmarknet",
        kind="agmarknet",
        url="https://agmarknet.example.com/SearchCmmMkt.aspx",
        enabled=True,
    )


def myscheme_source() -> SourceSettings:
    return SourceSettings(
        name="myScheme portal",
        kind="myscheme",
        url="https://www.myscheme.gov.in/search",
        enabled=True,
        selectors={
            "link": "h2 a[href^='/schemes/']",
            "card": "div",
            "description": "span.line-clamp-2",
            "category": "div[title]",
        },
    )


class TestHtmlTableFetcher:
    async def test_parses_matching_rows(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text=PRICE_TABLE_HTML)
        )
        fetcher = HtmlTableFetcher(table_source(), transport=transport)

        records = await fetcher.fetch(TOMATO)

        assert [r.market for r in records] == ["Bangalore", "Bangalore APMC"]
        first = records[0]
        assert (first.min_price, first.max_price, first.modal_price) == (28, 36, 32)
        assert first.date == date(2025, 1, 14)
        assert first.commodity == "Tomato"
        assert first.state == "Karnataka"
        assert first.source_tag == "NCDEX"
        assert records[1].date == date(2025, 1, 13)

    async def test_rows_for_other_markets_are_dropped(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text=PRICE_TABLE_HTML)
        )
        fetcher = HtmlTableFetcher(table_source(), transport=transport)
        mysore = PriceQuery(commodity="Tomato", state="Karnataka", market="Mysore")

        records = await fetcher.fetch(mysore)

        assert [(r.market, r.modal_price) for r in records] == [("Mysore", 34)]

    async def test_http_error_raises_scrape_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        fetcher = HtmlTableFetcher(table_source(), transport=transport)

        with pytest.raises(ScrapeError, match="HTTP 503"):
            await fetcher.fetch(TOMATO)

    async def test_missing_table_raises_scrape_error(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html><p>maintenance</p></html>")
        )
        fetcher = HtmlTableFetcher(table_source(), transport=transport)

        with pytest.raises(ScrapeError, match="Price table not found"):
            await fetcher.fetch(TOMATO)

    async def test_max_items(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text=PRICE_TABLE_HTML)
        )
        fetcher = HtmlTableFetcher(table_source(), max_items=1, transport=transport)

        assert len(await fetcher.fetch(TOMATO)) == 1

    def test_validate_config(self):
        assert HtmlTableFetcher(table_source()).validate_config() == (True, None)

        valid, error = HtmlTableFetcher(table_source(selectors={})).validate_config()
        assert valid is False
        assert "selectors.row" in error

        valid, _ = HtmlTableFetcher(
            table_source(url="http://127.0.0.1/prices")
        ).validate_config()
        assert valid is False

    def test_invalid_row_selector_rejected(self):
        valid, error = HtmlTableFetcher(
            table_source(selectors={"row": "table[class"})
        ).validate_config()

        assert valid is False
        assert "selectors.row is not a valid CSS selector" in error

    async def test_invalid_config_raises_on_fetch(self):
        fetcher = HtmlTableFetcher(table_source(url="ftp://prices.example.com"))

        with pytest.raises(ScrapeError, match="public HTTP"):
            await fetcher.fetch(TOMATO)


class TestAgmarknetFetcher:
    async def test_posts_viewstate_form_and_converts_quintal(self):
        posted: dict[str, list[str]] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, text=AGMARKNET_LANDING_HTML)
            posted.update(parse_qs(request.content.decode()))
            return httpx.Response(200, text=AGMARKNET_RESULT_HTML)

        fetcher = AgmarknetFetcher(
            agmarknet_source(), transport=httpx.MockTransport(handler)
        )

        records = await fetcher.fetch(TOMATO)

        assert posted["__VIEWSTATE"] == ["vs-token"]
        assert posted["__EVENTVALIDATION"] == ["ev-token"]
        assert posted["ctl00$cphBody$cboCommodity"] == ["Tomato"]
        assert posted["ctl00$cphBody$cboMkt"] == ["Bangalore"]

        assert len(records) == 1
        record = records[0]
        assert (record.min_price, record.max_price, record.modal_price) == (25, 36, 31)
        assert record.date == date(2025, 1, 14)
        assert record.source_tag == "Agmarknet"

    async def test_missing_viewstate(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html></html>")
        )
        fetcher = AgmarknetFetcher(agmarknet_source(), transport=transport)

        with pytest.raises(ScrapeError, match="__VIEWSTATE"):
            await fetcher.fetch(TOMATO)


class TestMySchemeFetcher:
    async def test_renders_and_parses_cards(self):
        fake = FakeBrowser(MYSCHEME_HTML)

        async def launcher() -> FakeBrowser:
            return fake

        fetcher = MySchemeFetcher(
            myscheme_source(), browser=BrowserSessionManager(launcher=launcher)
        )

        schemes = await fetcher.fetch(SchemeQuery())

        assert [s.id for s in schemes] == ["pmksy", "kcc"]
        assert schemes[0].description == "Per drop more crop"
        assert schemes[0].category == "Irrigation"
        assert schemes[0].url == "https://www.myscheme.gov.in/schemes/pmksy"
        assert schemes[1].name == "Kisan Credit Card"
        assert schemes[1].category == "General"
        assert all(s.source == "myScheme portal" for s in schemes)
        assert fake.pages[0].closed is True
        assert fake.pages[0].visited == ["https://www.myscheme.gov.in/search"]

    def test_search_url(self):
        fetcher = MySchemeFetcher(
            myscheme_source(), browser=BrowserSessionManager()
        )
        assert fetcher.search_url(SchemeQuery("drip irrigation")) == (
            "https://www.myscheme.gov.in/search?q=drip%20irrigation"
        )

    def test_no_cards(self):
        fetcher = MySchemeFetcher(
            myscheme_source(), browser=BrowserSessionManager()
        )
        with pytest.raises(ScrapeError, match="No scheme cards found"):
            fetcher.parse("<html><body>empty</body></html>")

    def test_default_selectors_are_valid(self):
        fetcher = MySchemeFetcher(
            DEFAULT_SCHEME_SOURCES[0], browser=BrowserSessionManager()
        )

        assert fetcher.validate_config() == (True, None)

    def test_invalid_selector_rejected(self):
        source = myscheme_source().model_copy(
            update={"selectors": {"link": "h2 a[href^='/schemes/'", "card": "div"}}
        )
        valid, error = MySchemeFetcher(
            source, browser=BrowserSessionManager()
        ).validate_config()

        assert valid is False
        assert "selectors.link" in error


class TestFetcherFactory:
    def test_creates_fetcher_per_kind(self):
        factory = FetcherFactory(browser=BrowserSessionManager())

        assert isinstance(factory.create(table_source()), HtmlTableFetcher)
        assert isinstance(factory.create(agmarknet_source()), AgmarknetFetcher)
        assert isinstance(factory.create(myscheme_source()), MySchemeFetcher)

    def test_invalid_config(self):
        factory = FetcherFactory(browser=BrowserSessionManager())

        with pytest.raises(InvalidSourceConfigError):
            factory.create(table_source(selectors={}))
        with pytest.raises(InvalidSourceConfigError):
            factory.create(table_source(selectors={"row": "table[class"}))

    def test_unsupported_kind(self):
        factory = FetcherFactory(browser=BrowserSessionManager())
        source = table_source().model_copy(update={"kind": "ftp"})

        with pytest.raises(UnsupportedSourceKindError):
            factory.create(source)

    def test_build_descriptors_skips_invalid(self):
        factory = FetcherFactory(browser=BrowserSessionManager())

        descriptors = factory.build_descriptors(
            [table_source(priority=2), table_source(name="broken", selectors={})]
        )

        assert [d.name for d in descriptors] == ["NCDEX"]
        assert descriptors[0].priority == 2
        assert descriptors[0].enabled is True
