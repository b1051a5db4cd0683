#!/usr/bin/env python3
"""数据源探测脚本。

逐个调用已配置的方案 / 价格数据源，报告每个源是否可用、返回多少条记录、耗时多少，
再走一遍完整的目录读取流程，确认最终是实时数据还是合成兜底。
可作为运维脚本或上线前的连通性检查使用。

使用方式：
    # 完整探测（只探测已启用的源）
    python scripts/catalog_probe.py

    # 包括配置里禁用的源
    python scripts/catalog_probe.py --include-disabled

    # 只检查特定组件
    python scripts/catalog_probe.py --component browser
    python scripts/catalog_probe.py --component prices --commodity Onion --state Maharashtra --market Pune

    # JSON 输出
    python scripts/catalog_probe.py --json

    # 退出码检查（用于 CI/CD）：任何源失败都返回非零退出码
    python scripts/catalog_probe.py --strict
"""

import argparse
import asyncio
import json
import sys
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.config import SourceSettings, settings  # noqa: E402
from src.core.infrastructure.browser import (  # noqa: E402
    BrowserSessionManager,
    BrowserUnavailableError,
    ScrapeError,
)
from src.modules.market.domain.entities import PriceQuery  # noqa: E402
from src.modules.schemes.domain.entities import SchemeQuery  # noqa: E402
from src.modules.sources.domain.exceptions import (  # noqa: E402
    InvalidSourceConfigError,
    UnsupportedSourceKindError,
)
from src.modules.sources.infrastructure.fetchers import FetcherFactory  # noqa: E402

COMPONENTS = ["browser", "schemes", "prices", "catalog"]


async def check_browser(browser: BrowserSessionManager) -> dict:
    """检查共享浏览器能否启动并打开页面。"""
    start_time = time.time()
    try:

        async def blank(page) -> str:
            await page.goto("about:blank")
            return await page.title()

        await browser.with_page(blank, timeout=30)
        return {
            "status": "healthy",
            "duration_ms": int((time.time() - start_time) * 1000),
            "launch_count": browser.launch_count,
        }
    except (BrowserUnavailableError, ScrapeError) as e:
        return {"status": "unhealthy", "error": str(e)}


async def probe_source(
    factory: FetcherFactory,
    source: SourceSettings,
    target: Any,
) -> dict:
    """单独调用一个数据源。"""
    start_time = time.time()
    try:
        fetcher = factory.create(source)
    except (InvalidSourceConfigError, UnsupportedSourceKindError) as e:
        return {"status": "error", "error": e.message}

    try:
        records = await asyncio.wait_for(
            fetcher.fetch(target), timeout=source.timeout_ms / 1000
        )
    except TimeoutError:
        return {
            "status": "unhealthy",
            "error": f"Timed out after {source.timeout_ms}ms",
        }
    except (ScrapeError, BrowserUnavailableError) as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "duration_ms": int((time.time() - start_time) * 1000),
        }

    count = len(records or [])
    return {
        "status": "healthy" if count else "warning",
        "records": count,
        "duration_ms": int((time.time() - start_time) * 1000),
        "sample": _sample(records),
    }


async def check_sources(
    factory: FetcherFactory,
    sources: list[SourceSettings],
    target: Any,
    include_disabled: bool,
) -> dict:
    """按优先级依次探测一组数据源（不短路）。"""
    results: dict[str, dict] = {}
    for source in sorted(sources, key=lambda s: s.priority):
        if not source.enabled and not include_disabled:
            results[source.name] = {"status": "skipped", "reason": "disabled"}
            continue
        results[source.name] = await probe_source(
            factory, source.model_copy(update={"enabled": True}), target
        )

    statuses = [r["status"] for r in results.values() if r["status"] != "skipped"]
    if not statuses:
        status = "skipped"
    elif all(s == "healthy" for s in statuses):
        status = "healthy"
    elif any(s == "healthy" for s in statuses):
        status = "degraded"
    else:
        status = "unhealthy"

    return {"status": status, "target": str(target), "sources": results}


async def check_catalog(browser: BrowserSessionManager, target: PriceQuery) -> dict:
    """走一遍完整目录流程，报告最终数据来源。"""
    from src.modules.catalog.application.context import build_catalog_context
    from src.modules.catalog.application.resilient_catalog import ResilientCatalog

    catalog = ResilientCatalog(
        build_catalog_context(browser=browser), refresh_enabled=False
    )
    schemes = await catalog.search_schemes(page_size=5)
    prices = await catalog.get_market_prices(
        target.commodity, target.state, target.market
    )

    status = "warning" if schemes.is_fallback else "healthy"
    return {
        "status": status,
        "schemes": {
            "source_used": schemes.source_used,
            "is_fallback": schemes.is_fallback,
            "total_results": schemes.pagination.total_results,
        },
        "prices": {
            "source_tag": prices[0].source_tag,
            "records": len(prices),
        },
        "health": catalog.health(),
    }


def _sample(records: list | None) -> dict | None:
    if not records:
        return None
    return records[0].model_dump(mode="json")


async def run_probe(
    components: list[str],
    target: PriceQuery,
    include_disabled: bool,
) -> dict:
    """运行探测。"""
    results: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "overall_status": "healthy",
        "components": {},
    }

    browser = BrowserSessionManager()
    factory = FetcherFactory(browser=browser)
    try:
        for component in components:
            if component == "browser":
                result = await check_browser(browser)
            elif component == "schemes":
                result = await check_sources(
                    factory, settings.SCHEME_SOURCES, SchemeQuery(), include_disabled
                )
            elif component == "prices":
                result = await check_sources(
                    factory, settings.PRICE_SOURCES, target, include_disabled
                )
            else:
                result = await check_catalog(browser, target)
            results["components"][component] = result
    finally:
        await browser.release(reason="probe finished")

    # 确定整体状态
    statuses = [c.get("status", "unknown") for c in results["components"].values()]
    if any(s in ("unhealthy", "error") for s in statuses):
        results["overall_status"] = "unhealthy"
    elif any(s in ("warning", "degraded") for s in statuses):
        results["overall_status"] = "degraded"

    return results


def _emoji(status: str) -> str:
    if status in ("healthy", "skipped"):
        return "✅"
    if status in ("warning", "degraded"):
        return "⚠️"
    return "❌"


def print_result(result: dict, json_output: bool = False):
    """打印探测结果。"""
    if json_output:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    print(f"\n{'=' * 60}")
    print(f"Catalog Probe Report - {result['timestamp']}")
    print(f"{'=' * 60}")
    print(
        f"\nOverall Status: {_emoji(result['overall_status'])} "
        f"{result['overall_status'].upper()}"
    )

    for component, info in result["components"].items():
        print(f"\n{'-' * 40}")
        print(f"{_emoji(info['status'])} {component}: {info['status']}")

        for name, source in info.get("sources", {}).items():
            line = f"    {_emoji(source['status'])} {name}: {source['status']}"
            if "records" in source:
                line += f" ({source['records']} records, {source['duration_ms']}ms)"
            if "error" in source:
                line += f" - {source['error']}"
            print(line)

        for key, value in info.items():
            if key not in ("status", "sources"):
                print(f"    {key}: {value}")

    print(f"\n{'=' * 60}\n")


def main():
    """主函数。"""
    parser = argparse.ArgumentParser(description="数据源探测脚本")
    parser.add_argument(
        "--component",
        "-c",
        type=str,
        choices=COMPONENTS,
        help="只检查特定组件",
    )
    parser.add_argument("--commodity", default="Tomato", help="价格探测的品种")
    parser.add_argument("--state", default="Karnataka", help="价格探测的邦")
    parser.add_argument("--market", default="Bangalore", help="价格探测的市场")
    parser.add_argument(
        "--include-disabled",
        action="store_true",
        help="同时探测配置中禁用的数据源",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="输出 JSON 格式",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任何非 healthy 状态都返回非零退出码",
    )

    args = parser.parse_args()

    components = [args.component] if args.component else COMPONENTS
    target = PriceQuery(commodity=args.commodity, state=args.state, market=args.market)
    result = asyncio.run(run_probe(components, target, args.include_disabled))

    print_result(result, args.json)

    # 确定退出码
    if args.strict and result["overall_status"] != "healthy":
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
