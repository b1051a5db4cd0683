"""统一的健康检查类型定义。

所有基础设施组件的健康检查都使用这些类型，确保类型安全和一致性。
"""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """健康检查状态枚举。"""

    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"
    DEGRADED = "degraded"


class BrowserHealthResult(BaseModel):
    """共享浏览器会话健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    running: bool = Field(..., description="浏览器是否在运行")
    launching: bool = Field(False, description="是否正在启动")
    launch_count: int = Field(0, description="累计启动次数")

    def to_dict(self) -> dict[str, str | bool | int]:
        """转换为字典（用于 API 响应）。"""
        return self.model_dump(mode="json")


class CatalogHealthResult(BaseModel):
    """目录缓存健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    catalog: str = Field(..., description="目录名称")
    cached_keys: int = Field(..., description="缓存键数量")
    states: dict[str, str] = Field(default_factory=dict, description="各键的状态")

    def to_dict(self) -> dict[str, str | int | dict[str, str]]:
        """转换为字典（用于 API 响应）。"""
        return self.model_dump(mode="json")
