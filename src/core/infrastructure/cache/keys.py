"""缓存 Key 命名规范。

- 方案列表快照: schemes:listing:{query}
- 方案详情: schemes:detail:{scheme_id}
- 市场价格快照: prices:{commodity}:{state}:{market}
"""


class CacheKeys:
    """缓存 Key 命名空间管理。"""

    SCHEME_LISTING_PREFIX = "schemes:listing"
    SCHEME_DETAIL_PREFIX = "schemes:detail"
    PRICE_PREFIX = "prices"

    @staticmethod
    def _normalize(value: str) -> str:
        return "-".join(value.strip().lower().split())

    @classmethod
    def scheme_listing(cls, query: str = "") -> str:
        """生成方案列表快照 key。

        Args:
            query: 上游数据源的检索词（空字符串表示全量列表）
        """
        return f"{cls.SCHEME_LISTING_PREFIX}:{cls._normalize(query) or 'all'}"

    @classmethod
    def scheme_detail(cls, scheme_id: str) -> str:
        return f"{cls.SCHEME_DETAIL_PREFIX}:{scheme_id}"

    @classmethod
    def prices(cls, commodity: str, state: str, market: str) -> str:
        """生成价格快照 key，大小写和空白不敏感。"""
        return ":".join(
            [
                cls.PRICE_PREFIX,
                cls._normalize(commodity),
                cls._normalize(state),
                cls._normalize(market),
            ]
        )
