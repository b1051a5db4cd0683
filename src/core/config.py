"""Application configuration."""

from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BaseModel, BeforeValidator, Field, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class SourceSettings(BaseModel):
    """单个数据源的配置项（优先级越小越先尝试）。"""

    name: str
    kind: Literal["myscheme", "agmarknet", "html_table"]
    url: str
    priority: int = 1
    enabled: bool = False
    timeout_ms: int = 20000
    selectors: dict[str, str] = Field(default_factory=dict)


DEFAULT_SCHEME_SOURCES: list[SourceSettings] = [
    SourceSettings(
        name="myScheme portal",
        kind="myscheme",
        url="https://www.myscheme.gov.in/search/category/Agriculture,Rural%20%26%20Environment",
        priority=1,
        timeout_ms=30000,
        selectors={
            "link": "h2 a[href^='/schemes/']",
            "card": "div",
            "description": "span.line-clamp-2",
            "category": "div[title]",
        },
    ),
]

DEFAULT_PRICE_SOURCES: list[SourceSettings] = [
    SourceSettings(
        name="NCDEX",
        kind="html_table",
        url="https://www.ncdex.com/market-data/live-prices",
        priority=1,
        timeout_ms=25000,
        selectors={"row": "table.price-table tr, .market-data-table tr"},
    ),
    SourceSettings(
        name="MCX",
        kind="html_table",
        url="https://www.mcxindia.com/market-data/live-prices",
        priority=2,
        timeout_ms=25000,
        selectors={"row": "table.mcx-price tr, .commodity-data tr"},
    ),
    SourceSettings(
        name="Agmarknet",
        kind="agmarknet",
        url="https://agmarknet.gov.in/SearchCmmMkt.aspx",
        priority=3,
        timeout_ms=20000,
    ),
    SourceSettings(
        name="Data.gov.in",
        kind="html_table",
        url="https://data.gov.in/resource/agricultural-prices",
        priority=4,
        timeout_ms=20000,
        selectors={"row": "table tr"},
    ),
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "farmAssist"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:5173"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Asia/Kolkata"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Cache TTL（秒）
    SCHEME_CACHE_TTL_SEC: int = 1800  # 30 minutes
    SCHEME_DETAIL_CACHE_TTL_SEC: int = 3600  # 1 hour
    PRICE_CACHE_TTL_SEC: int = 600  # 10 minutes

    # Refresh
    CATALOG_REFRESH_ENABLED: bool = True
    CATALOG_REFRESH_INTERVAL_SEC: int = 1800
    CATALOG_REQUEST_DEADLINE_SEC: float = 45.0  # 整条数据源链的总超时
    CATALOG_KEY_IDLE_SEC: int = 7200  # 超过该时长无人读取的 key 不再后台刷新
    CATALOG_MAX_KEYS: int = 500  # 每个目录登记 key 的上限

    # Pagination
    DEFAULT_PAGE: int = 1
    SCHEMES_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Browser / fetchers
    BROWSER_HEADLESS: bool = True
    BROWSER_PAGE_TIMEOUT_SEC: float = 30.0
    BROWSER_LAUNCH_ATTEMPTS: int = 2
    FETCHER_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    FETCHER_ACCEPT_LANGUAGE: str = "en-IN,en;q=0.9"
    ITEMS_PER_SOURCE_PER_FETCH: int = 100

    # Source tables（JSON 格式可通过环境变量覆盖）
    SCHEME_SOURCES: list[SourceSettings] = DEFAULT_SCHEME_SOURCES
    PRICE_SOURCES: list[SourceSettings] = DEFAULT_PRICE_SOURCES

    # Market
    PRICE_HISTORY_DAYS: int = 7
    PREDICTION_MAX_DAYS: int = 90


settings = Settings()
