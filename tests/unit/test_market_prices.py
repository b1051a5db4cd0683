"""市场价格服务单元测试。"""

from datetime import timedelta

import pytest

from src.core.config import settings
from src.core.infrastructure.browser import ScrapeError
from src.modules.catalog.application.resilient_catalog import ResilientCatalog
from src.modules.market.domain.entities import PriceRecord, PriceTrend
from src.modules.sources.domain.fetcher import SourceDescriptor
from tests.fakes import FIXED_TODAY

pytestmark = pytest.mark.anyio


def price_source(records, name: str = "Agmarknet", priority: int = 1):
    calls = []

    async def fetch(target):
        calls.append(target)
        if isinstance(records, Exception):
            raise records
        return records

    descriptor = SourceDescriptor(name=name, priority=priority, fetch=fetch)
    return descriptor, calls


def live_record(days_ago: int, modal: int = 30) -> PriceRecord:
    return PriceRecord(
        date=FIXED_TODAY - timedelta(days=days_ago),
        min_price=modal - 2,
        max_price=modal + 2,
        modal_price=modal,
        commodity="Tomato",
        market="Bangalore",
        state="Karnataka",
        source_tag="Agmarknet",
    )


class TestGetPrices:
    async def test_synthetic_prices_when_sources_unavailable(self, catalog):
        records = await catalog.get_market_prices("Tomato", "Karnataka", "Bangalore")

        assert len(records) == 7
        assert [r.date for r in records] == sorted(
            (r.date for r in records), reverse=True
        )
        assert records[0].date == FIXED_TODAY
        assert all(r.source_tag == "Market Intelligence" for r in records)
        assert all(r.min_price <= r.modal_price <= r.max_price for r in records)

    async def test_live_records_sorted_and_capped(self, catalog_factory):
        live = [live_record(i) for i in (3, 0, 9, 1, 5, 2, 8, 4, 6, 7)]
        descriptor, _ = price_source(live)
        catalog = ResilientCatalog(
            catalog_factory(price_descriptors=[descriptor]), refresh_enabled=False
        )

        records = await catalog.get_market_prices("Tomato", "Karnataka", "Bangalore")

        assert len(records) == 7
        assert records[0].date == FIXED_TODAY
        assert records[-1].date == FIXED_TODAY - timedelta(days=6)
        assert all(r.source_tag == "Agmarknet" for r in records)

    async def test_failing_source_falls_back(self, catalog_factory):
        descriptor, calls = price_source(ScrapeError("HTTP 503"))
        catalog = ResilientCatalog(
            catalog_factory(price_descriptors=[descriptor]), refresh_enabled=False
        )

        records = await catalog.get_market_prices("Onion", "Maharashtra", "Pune")

        assert len(calls) == 1
        assert len(records) == 7
        assert records[0].source_tag == "Market Intelligence"

    async def test_cached_per_normalized_key(self, catalog_factory):
        descriptor, calls = price_source([live_record(0)])
        catalog = ResilientCatalog(
            catalog_factory(price_descriptors=[descriptor]), refresh_enabled=False
        )

        await catalog.get_market_prices("Tomato", "Karnataka", "Bangalore")
        await catalog.get_market_prices("tomato", " karnataka", "BANGALORE")

        assert len(calls) == 1
        assert str(calls[0]) == "Tomato@Bangalore, Karnataka"

    async def test_junk_queries_do_not_grow_refresh_set(
        self, catalog_factory, monkeypatch
    ):
        monkeypatch.setattr(settings, "CATALOG_MAX_KEYS", 10)
        context = catalog_factory()
        catalog = ResilientCatalog(context, refresh_enabled=False)

        for i in range(50):
            await catalog.get_market_prices(f"Junk{i}", "Nowhere", "Nowhere")

        assert len(context.price_loader.keys) == 10
        assert context.price_loader.health().cached_keys == 10


class TestAnalytics:
    def test_prediction_days(self, catalog):
        predictions = catalog.generate_price_prediction(
            "Potato", "Karnataka", "Mysore", days=14
        )
        assert len(predictions) == 14
        assert predictions[0].date == FIXED_TODAY + timedelta(days=1)

    def test_seasonal_trends(self, catalog):
        assert len(catalog.generate_seasonal_trends("Onion")) == 12

    def test_volatility(self, catalog):
        analysis = catalog.generate_volatility_analysis("Rice", "Punjab", "Ludhiana")
        assert analysis.commodity == "Rice"
        assert len(analysis.price_data) == 30

    def test_supply_demand_and_export_import(self, catalog):
        supply_demand = catalog.generate_supply_demand_analysis(
            "Potato", "Karnataka", "Mysore"
        )
        trends = catalog.generate_export_import_trends("Onion", "Maharashtra", "Pune")

        assert supply_demand.equilibrium.status == "Balanced Market"
        assert len(trends.export_trends) == 12
        assert trends.international_factors.export_demand == 0.4

    def test_dashboard_combines_all_analytics(self, catalog):
        dashboard = catalog.generate_analytics_dashboard(
            "Tomato", "Karnataka", "Bangalore", days=10
        )

        assert dashboard.prediction_days == 10
        assert len(dashboard.price_prediction) == 10
        assert len(dashboard.seasonal_trends) == 12
        assert dashboard.volatility_analysis.commodity == "Tomato"
        assert dashboard.supply_demand_analysis.market == "Bangalore"
        assert dashboard.export_import_trends.state == "Karnataka"

    def test_dashboard_days_clamped(self, catalog):
        dashboard = catalog.generate_analytics_dashboard(
            "Tomato", "Karnataka", "Bangalore", days=500
        )
        assert dashboard.prediction_days == 90


class TestMarketAnalysis:
    async def test_analysis_of_live_prices(self, catalog_factory):
        live = [live_record(0, modal=36), live_record(1, modal=30)]
        descriptor, _ = price_source(live)
        catalog = ResilientCatalog(
            catalog_factory(price_descriptors=[descriptor]), refresh_enabled=False
        )

        analysis = await catalog.get_market_analysis("Tomato", "Karnataka", "Bangalore")

        assert analysis.price_trend == PriceTrend.INCREASING
        assert analysis.insights[0] == "Current modal price: ₹36 per kg"
        assert [p.modal_price for p in analysis.prices] == [36, 30]

    async def test_analysis_of_synthetic_prices(self, catalog):
        analysis = await catalog.get_market_analysis("Wheat", "Punjab", "Ludhiana")

        assert len(analysis.prices) == 7
        assert analysis.prices[0].source_tag == "Market Intelligence"
        assert len(analysis.insights) == 3


class TestReferenceLookups:
    def test_commodities_and_states(self, catalog):
        assert "Tomato" in catalog.get_available_commodities()
        assert "Karnataka" in catalog.get_available_states()

    def test_markets_for_known_and_unknown_state(self, catalog):
        assert "Bangalore" in catalog.get_available_markets("Karnataka")
        assert catalog.get_available_markets("Atlantis") == ["Default Market"]
