"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志（数据源失败、降级、缓存刷新等）
"""

import logging
import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings

QUIET_LOGGERS = ("httpx", "httpcore", "playwright", "asyncio")


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()
    _quiet_client_loggers()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/farmassist_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _quiet_client_loggers() -> None:
    """抓取客户端（httpx / playwright）只保留 WARNING 以上的日志。"""
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    Usage:
        BusinessEvents.source_fetch_failed(source_name="Agmarknet", error="timeout")
        BusinessEvents.feature_degraded(feature="prices", reason="all sources failed")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def source_fetch_failed(
        cls,
        source_name: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录源抓取失败事件。"""
        cls._log.warning(
            "source_fetch_failed",
            event_type="source_error",
            source_name=source_name,
            error=error,
            **extra,
        )

    @classmethod
    def catalog_refreshed(
        cls,
        catalog: str,
        key: str,
        source_used: str,
        record_count: int,
        is_fallback: bool,
        **extra: Any,
    ) -> None:
        """记录目录快照刷新事件。"""
        cls._log.info(
            "catalog_refreshed",
            event_type="refresh",
            catalog=catalog,
            key=key,
            source_used=source_used,
            record_count=record_count,
            is_fallback=is_fallback,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录功能降级事件。"""
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )

    @classmethod
    def browser_launched(cls, duration_ms: int, **extra: Any) -> None:
        """记录浏览器启动事件。"""
        cls._log.info(
            "browser_launched",
            event_type="browser",
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def browser_released(cls, reason: str, **extra: Any) -> None:
        """记录浏览器释放事件。"""
        cls._log.info(
            "browser_released",
            event_type="browser",
            reason=reason,
            **extra,
        )
