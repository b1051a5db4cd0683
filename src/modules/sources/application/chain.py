"""数据源链。

按 priority 升序依次尝试启用的数据源：
1. 每个源在自身 timeout_ms 内执行
2. 首个返回非空列表的源直接胜出，后续源不再调用
3. 超时、抛错或空结果记为 ScrapeError 并继续下一个源
4. 全部失败返回 None，由调用方走合成数据兜底
"""

import asyncio
import time
from collections.abc import Iterable
from typing import Any

from loguru import logger

from src.core.infrastructure.browser.exceptions import ScrapeError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.sources.domain.fetcher import (
    ChainResult,
    FetchStatus,
    SourceAttempt,
    SourceDescriptor,
)


class SourceChainFetcher:
    """按优先级短路执行的数据源链。"""

    def __init__(self, catalog_name: str = "default") -> None:
        self.catalog_name = catalog_name

    @staticmethod
    def order(
        descriptors: Iterable[SourceDescriptor[Any, Any]],
    ) -> list[SourceDescriptor[Any, Any]]:
        """过滤掉禁用的源并按优先级排序（同优先级保持配置顺序）。"""
        enabled = [d for d in descriptors if d.enabled]
        return sorted(enabled, key=lambda d: d.priority)

    async def fetch(
        self,
        target: Any,
        descriptors: Iterable[SourceDescriptor[Any, Any]],
    ) -> ChainResult[Any] | None:
        """依次尝试数据源。

        Args:
            target: 查询目标（由各数据源自行解释）
            descriptors: 数据源列表

        Returns:
            首个成功源的结果；全部失败返回 None
        """
        ordered = self.order(descriptors)
        if not ordered:
            logger.debug(f"[{self.catalog_name}] No enabled sources for {target}")
            return None

        attempts: list[SourceAttempt] = []
        for descriptor in ordered:
            start_time = time.time()
            try:
                records = await asyncio.wait_for(
                    descriptor.fetch(target),
                    timeout=descriptor.timeout_sec,
                )
            except TimeoutError:
                status = FetchStatus.TIMEOUT
                error = ScrapeError(
                    f"Timed out after {descriptor.timeout_ms}ms",
                    source_name=descriptor.name,
                )
            except ScrapeError as e:
                status = FetchStatus.FAILED
                error = e
            except Exception as e:
                status = FetchStatus.FAILED
                error = ScrapeError(f"Error: {e}", source_name=descriptor.name)
            else:
                duration_ms = int((time.time() - start_time) * 1000)
                if records:
                    attempts.append(
                        SourceAttempt(
                            source_name=descriptor.name,
                            status=FetchStatus.SUCCESS,
                            duration_ms=duration_ms,
                            records_count=len(records),
                        )
                    )
                    logger.info(
                        f"[{self.catalog_name}] Source {descriptor.name} returned "
                        f"{len(records)} records in {duration_ms}ms"
                    )
                    return ChainResult(
                        records=list(records),
                        source_used=descriptor.name,
                        attempts=attempts,
                    )
                status = FetchStatus.EMPTY
                error = ScrapeError("Returned no records", source_name=descriptor.name)

            duration_ms = int((time.time() - start_time) * 1000)
            attempts.append(
                SourceAttempt(
                    source_name=descriptor.name,
                    status=status,
                    duration_ms=duration_ms,
                    error_message=str(error),
                )
            )
            self._report_failure(descriptor, error, status, duration_ms)

        logger.warning(
            f"[{self.catalog_name}] All {len(ordered)} sources failed for {target}"
        )
        return None

    def _report_failure(
        self,
        descriptor: SourceDescriptor[Any, Any],
        error: ScrapeError,
        status: FetchStatus,
        duration_ms: int,
    ) -> None:
        logger.warning(f"[{self.catalog_name}] {error}")
        BusinessEvents.source_fetch_failed(
            source_name=descriptor.name,
            error=str(error),
            catalog=self.catalog_name,
            status=status.value,
            duration_ms=duration_ms,
        )
